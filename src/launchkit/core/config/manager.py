"""
launchkit settings management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from launchkit.core.utils.io import iter_yaml_files, read_yaml
from launchkit.core.utils.merge import deep_merge
from launchkit.data import get_data_path

from .cache import get_cached_config

logger = logging.getLogger(__name__)

ENV_PREFIX = "LAUNCHKIT_"
PROJECT_ROOT_ENV = "LAUNCHKIT_PROJECT_ROOT"
CONFIG_DIR_NAME = ".launchkit"


def resolve_project_root() -> Path:
    """Return ``$LAUNCHKIT_PROJECT_ROOT`` if set, else the current directory."""
    raw = os.environ.get(PROJECT_ROOT_ENV)
    if raw:
        return Path(raw).expanduser().resolve()
    return Path.cwd().resolve()


def get_user_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


class ConfigManager:
    """Load, merge, and validate launchkit settings.

    Sources (highest to lowest priority):
    1. Environment variables: LAUNCHKIT_<section>__<key>
    2. Project config: <project>/.launchkit/config/*.yaml (alphabetical order)
    3. User config: ~/.launchkit/config/*.yaml (alphabetical order)
    4. Bundled defaults: launchkit.data/config/*.yaml
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_dir = self.repo_root / CONFIG_DIR_NAME / "config"

    # ========== Environment overrides ==========

    def _coerce_type(self, value: str) -> Any:
        s = value.strip()
        low = s.lower()
        if low in {"true", "false"}:
            return low == "true"
        if re.fullmatch(r"[-+]?\d+", s):
            return int(s)
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return s
        return s

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == PROJECT_ROOT_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if not raw or any(seg == "" for seg in segs):
                logger.warning("Ignoring malformed settings override %s", key)
                continue
            yield [seg.lower() for seg in segs], self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            self._set_nested(cfg, path, value)

    # ========== Loading ==========

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            # Fail closed: settings must never silently ignore invalid YAML.
            layer = read_yaml(path, default={}, raise_on_error=True) or {}
            if not isinstance(layer, dict):
                raise ValueError(f"Settings file must contain a mapping: {path}")
            cfg = deep_merge(cfg, layer)
        return cfg

    def load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge every settings layer, bypassing the cache."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)

        if validate:
            from .schema import validate_payload

            validate_payload(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load settings through the central cache. Treat the result as read-only."""
        return get_cached_config(repo_root=self.repo_root, validate=validate)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting by dot-notation key.

        Example:
            >>> ConfigManager().get("launcher.thread.pool")
            16
        """
        current: Any = self.load_config()
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = [
    "ConfigManager",
    "ENV_PREFIX",
    "PROJECT_ROOT_ENV",
    "CONFIG_DIR_NAME",
    "resolve_project_root",
    "get_user_config_dir",
]
