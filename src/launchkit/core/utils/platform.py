"""Host platform helpers."""
from __future__ import annotations

import os
import platform
import re
from functools import lru_cache

FILE_SEPARATOR = os.sep

_SEPARATOR_RE = re.compile(r"[/\\]")


def fix_file_separator(command: str) -> str:
    """Rewrite every ``/`` and ``\\`` in ``command`` to the host separator.

    Lets callers write one canonical command string for every platform.
    """
    return _SEPARATOR_RE.sub(lambda _m: FILE_SEPARATOR, command)


@lru_cache(maxsize=1)
def os_name() -> str:
    """Host operating system name (read once)."""
    return platform.system()


def is_os_windows() -> bool:
    return os_name().lower().startswith("windows")


__all__ = ["FILE_SEPARATOR", "fix_file_separator", "os_name", "is_os_windows"]
