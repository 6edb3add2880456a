"""Path helpers."""

from __future__ import annotations

import os


def path_join(path: str, *args: str) -> str:
    """Join with '/', skipping empty parts: ``path_join("/tmp", "aa", "", "bb/", "cc")``
    gives ``/tmp/aa/bb/cc``."""
    result = path
    for name in args:
        if result and not result.endswith("/"):
            result += "/"
        if not name:
            continue
        result += name
    return result


def file_expand_user(name: str) -> str:
    """Replace a leading ``~`` with the user's home directory."""
    return os.path.expanduser(os.fspath(name))