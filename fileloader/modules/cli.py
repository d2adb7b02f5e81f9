# CLI argument parsing for fileloader

import argparse
import sys

from fileloader.modules.keepers.extractor import DEFAULT_OUTPUT_DIR


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="List, read and extract files from USTAR tar archives.",
    )
    p.add_argument(
        "--archive", "-a",
        dest="archive",
        help="Archive URL or local path",
    )
    p.add_argument(
        "--list",
        action="store_true",
        help="List the files in the archive",
    )
    p.add_argument(
        "--cat",
        dest="cat",
        metavar="NAME",
        help="Print one file from the archive",
    )
    p.add_argument(
        "--extract", "-x",
        action="store_true",
        help="Extract files from the archive to --output-dir",
    )
    p.add_argument(
        "--pattern", "-p",
        dest="pattern",
        help="Regular expression limiting --list and --extract to matching names",
    )
    p.add_argument(
        "--output-dir", "-o",
        dest="output_dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for extracted files (default: {DEFAULT_OUTPUT_DIR})",
    )
    p.add_argument(
        "--simple-output",
        action="store_true",
        help="Use simple output format for --list",
    )
    p.add_argument(
        "--log-file", "-l",
        dest="log_file",
        help="Path to save a complete log of output",
    )
    p.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed progress output",
    )
    p.add_argument(
        "--api", "-A",
        action="store_true",
        help="Start the API server (uvicorn)",
    )

    args = p.parse_args(argv)
    # Show help if no mode selected
    if not any([args.list, args.cat, args.extract, args.api]):
        p.print_help()
        sys.exit(0)
    if not args.api and not args.archive:
        p.error("--archive is required for --list, --cat and --extract")
    return args
