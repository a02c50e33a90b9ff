import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse


def is_remote_url(url):
    return urlparse(url).scheme in ('http', 'https', 'ftp')


def abspath(value: str) -> Optional[Path]:
    """
    Resolve a bookmark value to an existing local path.

    Expands ``~`` and environment variables. Returns the absolute path if
    the result exists on disk, otherwise None (the value is then treated
    as a URL).

    Args:
        value: URL or path as stored in the bookmark

    Returns:
        Absolute Path or None
    """
    if not value or is_remote_url(value):
        return None
    expanded = Path(os.path.expandvars(os.path.expanduser(value)))
    try:
        if expanded.exists():
            return expanded.resolve()
    except OSError:
        return None
    return None
