"""launchkit settings.

Layered YAML settings (bundled defaults, user, project) with
``LAUNCHKIT_*`` environment overrides, cached per project root.
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, register_cache_clearer
from .manager import ConfigManager, resolve_project_root

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "clear_all_caches",
    "get_cached_config",
    "register_cache_clearer",
    "resolve_project_root",
]
