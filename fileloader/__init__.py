"""fileloader - read files out of remote USTAR tar archives."""

__version__ = "1.0.0"
