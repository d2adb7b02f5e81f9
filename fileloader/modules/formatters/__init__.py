from .formatters import format_mtime, human_readable_size, format_entry_line
