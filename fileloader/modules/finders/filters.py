# filters.py
# Selecting files out of a decoded archive
#
# A FileFilter is one of three kinds: every file, one file by exact name,
# or every file whose name matches a regular expression.

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from fileloader.modules.finders.tar_parser import FileRecord


class FilterKind(Enum):
    ALL = "all"
    BY_NAME = "name"
    BY_PATTERN = "pattern"


@dataclass(frozen=True)
class FileFilter:
    kind: FilterKind
    name: Optional[str] = None
    pattern: Optional[re.Pattern] = None

    @classmethod
    def all(cls) -> "FileFilter":
        return cls(FilterKind.ALL)

    @classmethod
    def by_name(cls, name: str) -> "FileFilter":
        return cls(FilterKind.BY_NAME, name=name)

    @classmethod
    def by_pattern(cls, pattern: Union[str, re.Pattern]) -> "FileFilter":
        return cls(FilterKind.BY_PATTERN, pattern=re.compile(pattern))


FilterLike = Union[FileFilter, str, re.Pattern, None]


def as_filter(value: FilterLike, default: Optional[FileFilter] = None) -> FileFilter:
    """
    Coerce the shorthand filter forms accepted by the loader accessors.

    None or "" -> default (or ALL), str -> BY_NAME, compiled regex -> BY_PATTERN.
    """
    if value is None or value == "":
        return default or FileFilter.all()
    if isinstance(value, FileFilter):
        return value
    if isinstance(value, str):
        return FileFilter.by_name(value)
    if isinstance(value, re.Pattern):
        return FileFilter.by_pattern(value)
    raise TypeError("Filter must be a FileFilter, regex, string or None")


def matching_files(files: list[FileRecord], file_filter: FileFilter) -> list[FileRecord]:
    """Return the records selected by file_filter, in archive order."""
    if file_filter.kind is FilterKind.ALL:
        return list(files)
    if file_filter.kind is FilterKind.BY_NAME:
        return [f for f in files if f.name == file_filter.name]
    return [f for f in files if file_filter.pattern.search(f.name)]


def select_files(files: list[FileRecord], file_filter: FileFilter, action: Callable):
    """
    Apply action to the files selected by file_filter.

    Returns:
        BY_NAME: the action result for the first matching file, or None
        ALL / BY_PATTERN: a list of action results in archive order
    """
    results = [action(f) for f in matching_files(files, file_filter)]
    if file_filter.kind is FilterKind.BY_NAME:
        return results[0] if results else None
    return results
