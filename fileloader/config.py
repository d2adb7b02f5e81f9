# config.py
# Runtime settings, read once from the environment.

import os


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


# Base used to turn relative archive identifiers into absolute URLs
BASE_URL = os.getenv("FILELOADER_BASE_URL", "")

# Seconds before an archive request is abandoned
REQUEST_TIMEOUT = _int_env("FILELOADER_TIMEOUT", 30)

# Optional basic auth for protected archive hosts
USERNAME = os.getenv("FILELOADER_USERNAME", "")
PASSWORD = os.getenv("FILELOADER_PASSWORD", "")

API_HOST = os.getenv("FILELOADER_API_HOST", "127.0.0.1")
API_PORT = _int_env("FILELOADER_API_PORT", 8000)


def basic_auth():
    """Return a (user, password) tuple when both credentials are configured."""
    if USERNAME and PASSWORD:
        return (USERNAME, PASSWORD)
    return None
