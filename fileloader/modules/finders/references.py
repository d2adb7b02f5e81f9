# references.py
# Archive file references of the form
#   data:FileLoader.js,<archive url>,<file path in archive>
# either bare (src/href attributes) or wrapped in a CSS url(...) rule.

import re
from dataclasses import dataclass

from fileloader.modules.errors import InvalidReferenceError
from fileloader.modules.finders.tar_parser import FileRecord


REFERENCE_FORMAT = re.compile(r"data:FileLoader\.js,([^,]+),(.*)")
REFERENCE_FORMAT_IN_CSS = re.compile(r"""^url\(["']*data:FileLoader\.js,([^,]+),(.*?)["']*\)$""")


@dataclass(frozen=True)
class ArchiveReference:
    archive_url: str
    path: str


def parse_reference(value: str) -> ArchiveReference:
    """
    Split a reference into its archive URL and file path.

    Raises:
        InvalidReferenceError: value is not a FileLoader reference
    """
    value = value.strip()
    match = REFERENCE_FORMAT_IN_CSS.match(value) or REFERENCE_FORMAT.fullmatch(value)
    if match is None:
        raise InvalidReferenceError(f"Not an archive reference: {value!r}")
    return ArchiveReference(archive_url=match.group(1), path=match.group(2))


def is_reference(value: str) -> bool:
    try:
        parse_reference(value)
    except InvalidReferenceError:
        return False
    return True


async def resolve_reference(value: str, cache) -> FileRecord:
    """
    Load the referenced archive through cache and return the file.

    Raises:
        InvalidReferenceError: value is not a reference
        FileNotInArchiveError: archive has no file at the referenced path
    """
    ref = parse_reference(value)
    loader = await cache.open(ref.archive_url)
    return loader.require(ref.path)
