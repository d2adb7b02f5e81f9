from datetime import datetime, timezone

from fileloader.modules.finders.tar_parser import FileRecord


#========= FORMATTER
def format_mtime(modified_at: datetime) -> str:
    """Format a file time as 'YYYY-MM-DD HH:MM' (UTC)."""
    try:
        if modified_at.timestamp() <= 0:
            return "----.--.-- --:--"
        return modified_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")
    except (OSError, ValueError, OverflowError):
        return "----.--.-- --:--"


def human_readable_size(size):
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"


#----- Archive listing line
def format_entry_line(record: FileRecord, simple: bool = False) -> str:
    """
    Format a FileRecord for display.

    Args:
        record: File read from the archive
        simple: One-word tag and size instead of the aligned listing

    Returns:
        Formatted string for display
    """
    size_str = human_readable_size(record.size)
    if simple:
        return f"  [FILE] {record.name} ({size_str})"
    return f"  {size_str.rjust(10)}  {format_mtime(record.modified_at)}  {record.name}"
