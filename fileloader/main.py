#  fileloader main CLI
#  Reads a whole tar archive into memory and lists, prints or extracts its files
import re
import sys

from fileloader import config
from fileloader.modules.cli import parse_args
from fileloader.modules.errors import FileLoaderError
from fileloader.modules.finders.filters import FileFilter
from fileloader.modules.finders.tar_parser import bytes_to_text
from fileloader.modules.formatters import format_entry_line, human_readable_size
from fileloader.modules.keepers.downloaders import load_archive
from fileloader.modules.keepers.extractor import extract_files
from fileloader.modules.keepers.loader import FileLoader


# split output to file and stdout
class Tee:
    """Duplicate stdout/stderr to a file and the console."""
    def __init__(self, *files):
        self.files = files
    def write(self, data):
        for f in self.files:
            f.write(data)
    def flush(self):
        for f in self.files:
            f.flush()


def run(args) -> int:
    # progress output would corrupt the bytes written by --cat
    verbose = not args.quiet and not args.cat
    files = load_archive(args.archive, verbose=verbose)
    loader = FileLoader(files, source=args.archive)
    file_filter = FileFilter.by_pattern(args.pattern) if args.pattern else None

    # --- list mode ---
    if args.list:
        selected = loader.get_files(file_filter)
        if verbose:
            total = sum(f.size for f in selected)
            print(f"\n[*] {len(selected)} files, {human_readable_size(total)}\n")
        for record in selected:
            print(format_entry_line(record, simple=args.simple_output))

    # --- cat mode: write the raw bytes so binary files survive ---
    if args.cat:
        content = loader.get_bytes(args.cat)
        if content is None:
            print(f"[!] Error: {args.cat} not found in {args.archive}", file=sys.stderr)
            return 1
        out = getattr(sys.stdout, "buffer", None)
        if out is None:
            print(bytes_to_text(content), end="")
        else:
            sys.stdout.flush()
            out.write(content)
            out.flush()

    # --- extract mode ---
    if args.extract:
        result = extract_files(files, args.output_dir, file_filter, verbose=verbose)
        if result.error:
            print(f"[!] Error: {result.error}")
            return 1

    return 0


def main(argv=None):
    args = parse_args(argv)

    # --- API server mode ---
    if args.api:
        import uvicorn
        print(f"[*] Starting API server on http://{config.API_HOST}:{config.API_PORT}/docs")
        uvicorn.run("fileloader.modules.api.api:app", host=config.API_HOST, port=config.API_PORT)
        return

    # set up logging/tee if requested
    log_f = None
    stdout, stderr = sys.stdout, sys.stderr
    if args.log_file:
        log_f = open(args.log_file, "w", encoding="utf-8")
        sys.stdout = Tee(sys.stdout, log_f)
        sys.stderr = Tee(sys.stderr, log_f)

    try:
        code = run(args)
    except FileLoaderError as e:
        print(f"[!] Error: {e}")
        code = 1
    except re.error as e:
        print(f"[!] Error: invalid --pattern: {e}")
        code = 2
    finally:
        if log_f is not None:
            sys.stdout, sys.stderr = stdout, stderr
            log_f.close()

    sys.exit(code)


if __name__ == "__main__":
    main()
