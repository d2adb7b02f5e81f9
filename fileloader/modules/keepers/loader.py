# loader.py
# Accessors over the files of one decoded archive.
#
# Every accessor takes an optional filter (FileFilter, exact name, compiled
# regex or None). An exact name returns a single value or None; the other
# forms return a list in archive order.

import base64
import json
import mimetypes
import xml.etree.ElementTree as ET
from typing import Optional

from fileloader.modules.errors import FileNotInArchiveError
from fileloader.modules.finders.filters import FileFilter, FilterLike, as_filter, select_files
from fileloader.modules.finders.tar_parser import FileRecord, bytes_to_text


# =============================================================================
# Default Filters
# =============================================================================

JSON_FILES = FileFilter.by_pattern(r".*\.json$")
XML_FILES = FileFilter.by_pattern(r".*\.xml$")
IMAGE_FILES = FileFilter.by_pattern(r".*\.(png|gif|jpeg|jpg|svg|bmp|tiff)$")
SCRIPT_FILES = FileFilter.by_pattern(r".*\.js$")
STYLESHEET_FILES = FileFilter.by_pattern(r".*\.css$")
HTML_FILES = FileFilter.by_pattern(r".*\.html$")

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(name: str) -> str:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


def file_to_data_url(record: FileRecord, mime_type: Optional[str] = None) -> str:
    """Encode a file as a base64 data: URL."""
    payload = base64.b64encode(record.content).decode("ascii")
    return f"data:{mime_type or guess_mime_type(record.name)};base64,{payload}"


class FileLoader:
    """
    Read-only view over the files of one archive.

    Usage:
        loader = FileLoader(read_tar_file(data))
        loader.get_text("readme.txt")           # str or None
        loader.get_json()                       # every *.json, parsed
        loader.get_bytes(re.compile(r"^img/"))  # list of bytes
    """

    def __init__(self, files: list[FileRecord], source: str = ""):
        self.files = files
        self.source = source

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self):
        return iter(self.files)

    def names(self) -> list[str]:
        return [f.name for f in self.files]

    def _select(self, file_filter: FilterLike, action, default: Optional[FileFilter] = None):
        return select_files(self.files, as_filter(file_filter, default), action)

    def require(self, name: str) -> FileRecord:
        """
        Return the file called name.

        Raises:
            FileNotInArchiveError: no such file
        """
        record = self._select(name, lambda f: f)
        if record is None:
            raise FileNotInArchiveError(name, self.source)
        return record

    def get_files(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: f)

    def get_time(self, file_filter: FilterLike = None):
        """Last edition time(s), as timezone-aware datetimes."""
        return self._select(file_filter, lambda f: f.modified_at)

    def get_bytes(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: f.content)

    def get_text(self, file_filter: FilterLike = None):
        """File content decoded one character per byte (extended bytes shifted)."""
        return self._select(file_filter, lambda f: bytes_to_text(f.content))

    def get_url(self, file_filter: FilterLike = None, mime_type: Optional[str] = None):
        return self._select(file_filter, lambda f: file_to_data_url(f, mime_type))

    def get_json(self, file_filter: FilterLike = None):
        return self._select(
            file_filter, lambda f: json.loads(bytes_to_text(f.content)), JSON_FILES
        )

    def get_xml(self, file_filter: FilterLike = None):
        """Parsed XML root element(s)."""
        return self._select(
            file_filter, lambda f: ET.fromstring(bytes_to_text(f.content)), XML_FILES
        )

    def get_images(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: f.content, IMAGE_FILES)

    def get_scripts(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: bytes_to_text(f.content), SCRIPT_FILES)

    def get_stylesheets(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: bytes_to_text(f.content), STYLESHEET_FILES)

    def get_html(self, file_filter: FilterLike = None):
        return self._select(file_filter, lambda f: bytes_to_text(f.content), HTML_FILES)
