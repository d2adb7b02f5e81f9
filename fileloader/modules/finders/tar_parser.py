# tar_parser.py
# USTAR tar decoder for fully downloaded archives
#
# Walks 512-byte headers in an in-memory buffer and returns the regular
# files it contains. Directories and NUL padding blocks are skipped.

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from fileloader.modules.errors import MalformedHeaderError, OutOfBoundsError


BLOCK_SIZE = 512

# Header field offsets (POSIX ustar)
NAME_FIELD = (0, 100)
SIZE_FIELD = (124, 136)
MTIME_FIELD = (136, 148)
TYPEFLAG_OFFSET = 156

DIRTYPE = ord("5")

# Offset applied to bytes above the 7-bit range when read as text
EXTENDED_BYTE_SHIFT = 0x67

# ASCII whitespace only; \x1c-\x1f in a numeric field is junk, not padding
_BLANK_CHARS = re.compile(r"[\0\s]", re.ASCII)
_OCTAL_DIGITS = re.compile(r"[0-7]+")


@dataclass(frozen=True)
class FileRecord:
    """A regular file read from a tar archive."""
    name: str
    modified_at: datetime
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (content omitted)."""
        return {
            "name": self.name,
            "size": self.size,
            "mtime": int(self.modified_at.timestamp()),
        }


def bytes_to_text(data) -> str:
    """
    Convert raw bytes to a string, one character per byte.

    Bytes up to 127 map to the same code point. Extended bytes are shifted
    up by 0x67 instead of landing in the Latin-1 supplement.

    Examples:
        b'abc'    -> 'abc'
        b'\\x80'   -> '\\xe7'
        b'\\xff'   -> '\\u0166'
    """
    return "".join(
        chr(byte if byte <= 127 else byte + EXTENDED_BYTE_SHIFT) for byte in data
    )


def _parse_octal(raw: bytes, field: str, offset: int) -> int:
    """Parse an octal numeric field. Blank fields count as zero."""
    text = _BLANK_CHARS.sub("", bytes_to_text(raw))
    if not text:
        return 0
    if not _OCTAL_DIGITS.fullmatch(text):
        raise MalformedHeaderError(field, text, offset)
    return int(text, 8)


def _to_datetime(seconds: int, offset: int) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise MalformedHeaderError("mtime", oct(seconds), offset) from None


def parse_file_header(data, offset: int) -> tuple[FileRecord, int]:
    """
    Decode the file header at offset and slice out its content.

    Returns (record, content_length). The caller is responsible for having
    ruled out padding blocks and directories.

    Raises:
        MalformedHeaderError: size or mtime is not octal text
        OutOfBoundsError: the header or content runs past the buffer
    """
    length = len(data)
    header_end = offset + BLOCK_SIZE
    if header_end > length:
        raise OutOfBoundsError(offset, header_end, length, offset)

    header = bytes(data[offset:header_end])

    size = _parse_octal(header[SIZE_FIELD[0]:SIZE_FIELD[1]], "size", offset)
    mtime = _parse_octal(header[MTIME_FIELD[0]:MTIME_FIELD[1]], "mtime", offset)
    name = bytes_to_text(header[NAME_FIELD[0]:NAME_FIELD[1]]).replace("\0", "")

    content_end = header_end + size
    if content_end > length:
        raise OutOfBoundsError(header_end, content_end, length, offset)

    record = FileRecord(
        name=name,
        modified_at=_to_datetime(mtime, offset),
        content=bytes(data[header_end:content_end]),
    )
    return record, size


def read_tar_file(data) -> list[FileRecord]:
    """
    Read a complete tar buffer and return the files it contains.

    Args:
        data: bytes, bytearray or memoryview holding the whole archive

    Returns:
        FileRecords in archive order. Each record owns a copy of its
        content, so the input buffer may be released afterwards.

    Raises:
        DecodeError: on the first malformed or truncated header; no partial
        list is returned.
    """
    files = []
    offset = 0
    length = len(data)

    while offset < length:
        # padding blocks and directories carry nothing to emit
        typeflag = data[offset + TYPEFLAG_OFFSET] if offset + TYPEFLAG_OFFSET < length else None
        if data[offset] != 0 and typeflag != DIRTYPE:
            record, size = parse_file_header(data, offset)
            files.append(record)
            offset += size

        # skip the header, then realign to the block boundary
        offset += BLOCK_SIZE
        if offset % BLOCK_SIZE:
            offset += BLOCK_SIZE - offset % BLOCK_SIZE

    return files
