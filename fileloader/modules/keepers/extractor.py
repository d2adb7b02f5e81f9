# extractor.py
# Writing archive files to disk.

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from fileloader.modules.finders.filters import FilterLike, as_filter, matching_files
from fileloader.modules.finders.tar_parser import FileRecord


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_OUTPUT_DIR = "./extracted"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ExtractResult:
    """Result of an extraction run."""
    output_dir: str
    files_written: int = 0
    bytes_written: int = 0
    saved_paths: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    elapsed_time: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "output_dir": self.output_dir,
            "files_written": self.files_written,
            "bytes_written": self.bytes_written,
            "saved_paths": self.saved_paths,
            "skipped": self.skipped,
            "elapsed_time": self.elapsed_time,
            "error": self.error,
        }


# =============================================================================
# Extraction
# =============================================================================

def output_path_for(name: str, output_dir: str) -> Optional[Path]:
    """
    Map an archive name to a path below output_dir.

    Leading slashes are dropped. Returns None when the name would escape
    output_dir (e.g. through '..').
    """
    root = Path(output_dir).resolve()
    target = (root / name.lstrip("/")).resolve()
    if target == root or root not in target.parents:
        return None
    return target


def save_file(record: FileRecord, output_dir: str) -> Optional[str]:
    """
    Write one file below output_dir and stamp it with its archive mtime.

    Returns the path where the file was saved, or None if it was refused.
    """
    output_path = output_path_for(record.name, output_dir)
    if output_path is None:
        return None

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(record.content)

    mtime = record.modified_at.timestamp()
    os.utime(output_path, (mtime, mtime))
    return str(output_path)


def extract_files(
    files: list[FileRecord],
    output_dir: str = DEFAULT_OUTPUT_DIR,
    file_filter: FilterLike = None,
    verbose: bool = False,
) -> ExtractResult:
    """
    Write the selected files below output_dir.

    Args:
        files: Decoded archive files
        output_dir: Destination directory (created if missing)
        file_filter: Which files to write (default: all)
        verbose: Print progress

    Returns:
        ExtractResult; unsafe names are listed in skipped, an OSError is
        reported in error and stops the run.
    """
    start_time = time.time()
    result = ExtractResult(output_dir=output_dir)

    for record in matching_files(files, as_filter(file_filter)):
        try:
            saved_path = save_file(record, output_dir)
        except OSError as e:
            result.error = f"{record.name}: {e}"
            if verbose:
                print(f"  [!] Failed to write {record.name}: {e}")
            break

        if saved_path is None:
            result.skipped.append(record.name)
            if verbose:
                print(f"  [!] Skipping unsafe path {record.name!r}")
            continue

        result.files_written += 1
        result.bytes_written += record.size
        result.saved_paths.append(saved_path)
        if verbose:
            print(f"  [+] {record.name} -> {saved_path}")

    result.elapsed_time = time.time() - start_time
    if verbose:
        print(f"\nDone! {result.files_written} files written to {output_dir}")
    return result
