from .tar_parser import FileRecord, bytes_to_text, read_tar_file, parse_file_header
from .filters import FileFilter, FilterKind, as_filter, matching_files, select_files
from .references import ArchiveReference, parse_reference, is_reference, resolve_reference
