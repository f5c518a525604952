"""Recursive file tree operations.

Traversal is plain recursion over the live filesystem; nothing is cached.
``recursive_list`` and ``recursive_copy_to`` follow symlinked directories
and do not detect cycles, so a cyclic link ends in ``RecursionError``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .core import PathLike, copy, using

logger = logging.getLogger(__name__)


def _children(path: Path) -> List[Path]:
    return sorted(path.iterdir(), key=lambda p: p.name)


def _io_settings():
    from launchkit.core.config.domains.io import IOConfig

    return IOConfig()


def copy_to(source: PathLike, target: PathLike) -> int:
    """Copy the bytes of file ``source`` into file ``target``.

    Both files are closed on every exit path. ``target`` is created or
    truncated; its parent directory must exist.

    Returns:
        int: Number of bytes copied
    """
    buffer_size = _io_settings().buffer_size
    return using(
        open(source, "rb"),
        lambda src: using(open(target, "wb"), lambda out: copy(src, out, buffer_size)),
    )


def read_file(path: PathLike) -> bytes:
    """Return the full content of ``path``."""
    with open(path, "rb") as f:
        return f.read()


def read_file_text(path: PathLike, charset: Optional[str] = None) -> str:
    """Return the content of ``path`` decoded with ``charset``.

    ``charset`` defaults to ``launcher.io.charset`` (utf-8).
    """
    return read_file(path).decode(charset or _io_settings().charset)


def recursive_list(root: PathLike) -> List[Path]:
    """List ``root`` and everything below it in pre-order.

    The root comes first, then each child's own listing, children in name
    order. A file (or missing path) lists as ``[root]``.
    """
    root = Path(root)
    if not root.is_dir():
        return [root]
    nodes = [root]
    for child in _children(root):
        nodes.extend(recursive_list(child))
    return nodes


def recursive_delete(root: PathLike) -> None:
    """Delete ``root`` and everything below it, children first.

    Missing paths are a no-op. Symlinks are removed, not followed. A node
    that cannot be deleted is logged and skipped; the walk continues.
    """
    root = Path(root)
    if not (root.exists() or root.is_symlink()):
        return
    if root.is_dir() and not root.is_symlink():
        try:
            children = _children(root)
        except OSError as exc:
            logger.debug("Cannot list %s for deletion: %s", root, exc)
            children = []
        for child in children:
            recursive_delete(child)
        try:
            root.rmdir()
        except OSError as exc:
            logger.debug("Skipping undeletable directory %s: %s", root, exc)
        return
    try:
        root.unlink()
    except OSError as exc:
        logger.debug("Skipping undeletable file %s: %s", root, exc)


def recursive_copy_to(root: PathLike, target: PathLike) -> None:
    """Copy the tree at ``root`` to ``target``.

    Directories are created (parents included) and their children copied
    under the same names; files are copied with :func:`copy_to`.
    """
    root = Path(root)
    target = Path(target)
    if root.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        for child in _children(root):
            recursive_copy_to(child, target / child.name)
    else:
        copy_to(root, target)


__all__ = [
    "copy_to",
    "read_file",
    "read_file_text",
    "recursive_list",
    "recursive_delete",
    "recursive_copy_to",
]
