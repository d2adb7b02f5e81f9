"""
Exception classes for fileloader.
"""

from typing import Optional


class FileLoaderError(Exception):
    """Base exception class for fileloader errors."""
    pass


class DecodeError(FileLoaderError):
    """Raised when a tar buffer cannot be decoded."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (header at offset {offset})")
        self.offset = offset


class MalformedHeaderError(DecodeError):
    """Raised when a numeric header field is not valid octal text."""

    def __init__(self, field: str, raw: str, offset: int):
        super().__init__(f"Malformed {field} field {raw!r}", offset)
        self.field = field
        self.raw = raw


class OutOfBoundsError(DecodeError):
    """Raised when a header or its content runs past the end of the buffer."""

    def __init__(self, start: int, end: int, length: int, offset: int):
        super().__init__(
            f"Range {start}..{end} exceeds buffer of {length} bytes", offset
        )
        self.start = start
        self.end = end
        self.length = length


class TransportError(FileLoaderError):
    """Raised when an archive cannot be fetched."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        if status_code is not None:
            message = f"Error HTTP {status_code} when loading tar file: {url}"
        else:
            message = f"Failed to load tar file: {url}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FileNotInArchiveError(FileLoaderError):
    """Raised when a requested path is not present in an archive."""

    def __init__(self, name: str, archive: str = ""):
        where = f" in {archive}" if archive else ""
        super().__init__(f"File {name!r} not found{where}")
        self.name = name
        self.archive = archive


class InvalidReferenceError(FileLoaderError):
    """Raised when a string is not a valid archive file reference."""
    pass
