"""Centralized settings caching.

Provides a single source of truth for loaded settings across all domain
configs. Domain configs should use this module's caching instead of
implementing their own.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}
_cache_clearers: Dict[str, Callable[[], None]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from .manager import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Optional[Path]) -> str:
    """Build a cache key from the project root and LAUNCHKIT_* environment.

    Long-running processes and tests may change LAUNCHKIT_* variables after
    a first load; fingerprinting them keeps cache hits from going stale.
    """
    base = str(_normalize_repo_root(repo_root))
    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith("LAUNCHKIT_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]
    return f"{base}:env={env_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get settings with caching.

    Returns the same dict instance for the same project root and
    environment, avoiding repeated file I/O. Treat the result as read-only.

    Args:
        repo_root: Project root. Uses ``resolve_project_root()`` if None.
        validate: Whether to validate against the bundled schema on a miss.
    """
    key = _cache_key(repo_root)
    if key not in _config_cache:
        from .manager import ConfigManager

        manager = ConfigManager(repo_root=_normalize_repo_root(repo_root))
        _config_cache[key] = manager.load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the settings cache and every registered dependent cache."""
    _config_cache.clear()
    for clearer in list(_cache_clearers.values()):
        clearer()


def register_cache_clearer(name: str, clearer: Callable[[], None]) -> None:
    """Register an extra clearer to run inside :func:`clear_all_caches`.

    Use this to keep objects built from settings (such as the default worker
    pool) coherent with the settings cache.
    """
    _cache_clearers[name] = clearer


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(repo_root) in _config_cache


__all__ = [
    "get_cached_config",
    "clear_all_caches",
    "register_cache_clearer",
    "is_cached",
]
