"""Utility helpers for launchkit core.

This package provides:
- io/: byte-stream copy, scoped acquisition, recursive file tree operations
- text/: placeholder substitution
- platform: host OS detection and path separator rewriting
- pool: background worker pool
- subprocess: subprocess spawning with stream redirection
"""
from __future__ import annotations

# I/O utilities
from .io import (
    DEFAULT_BUFFER_SIZE,
    PathLike,
    copy,
    copy_to,
    quiet_closing,
    read_bytes,
    read_file,
    read_file_text,
    recursive_copy_to,
    recursive_delete,
    recursive_list,
    using,
)

# Platform utilities
from .platform import FILE_SEPARATOR, fix_file_separator, is_os_windows, os_name

# Text utilities
from .text import as_string_mapping, filter_placeholders, filter_structure, translate

# Pool and subprocess utilities - lazy import; they load settings on use.
# Import directly from launchkit.core.utils.pool / launchkit.core.utils.subprocess

__all__ = [
    # I/O
    "PathLike",
    "DEFAULT_BUFFER_SIZE",
    "copy",
    "read_bytes",
    "quiet_closing",
    "using",
    "copy_to",
    "read_file",
    "read_file_text",
    "recursive_list",
    "recursive_delete",
    "recursive_copy_to",
    # Platform
    "FILE_SEPARATOR",
    "fix_file_separator",
    "os_name",
    "is_os_windows",
    # Text
    "translate",
    "filter_placeholders",
    "filter_structure",
    "as_string_mapping",
]
