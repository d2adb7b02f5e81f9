from .downloaders import fetch_archive_bytes, load_archive
from .loader import FileLoader, file_to_data_url, guess_mime_type
from .archive_cache import Archive, ArchiveCache
from .extractor import extract_files, save_file, ExtractResult
