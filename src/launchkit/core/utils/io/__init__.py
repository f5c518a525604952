"""I/O utilities for launchkit.

- core: byte-stream copy, scoped acquisition
- tree: recursive list/delete/copy over directory trees
- yaml: YAML readers for the settings loader
"""
from __future__ import annotations

from .core import (
    DEFAULT_BUFFER_SIZE,
    PathLike,
    copy,
    quiet_closing,
    read_bytes,
    using,
)
from .tree import (
    copy_to,
    read_file,
    read_file_text,
    recursive_copy_to,
    recursive_delete,
    recursive_list,
)
from .yaml import iter_yaml_files, read_yaml

__all__ = [
    # core
    "PathLike",
    "DEFAULT_BUFFER_SIZE",
    "copy",
    "read_bytes",
    "quiet_closing",
    "using",
    # tree
    "copy_to",
    "read_file",
    "read_file_text",
    "recursive_list",
    "recursive_delete",
    "recursive_copy_to",
    # yaml
    "read_yaml",
    "iter_yaml_files",
]
