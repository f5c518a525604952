"""Base class for domain-specific settings accessors."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Typed, cached access to one section of the merged settings.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "launcher.io"

            @cached_property
            def charset(self) -> str:
                return str(self.section.get("charset", "utf-8"))
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self._repo_root = repo_root
        self._config = get_cached_config(repo_root=repo_root)

    @property
    def repo_root(self) -> Path:
        if self._repo_root:
            return self._repo_root

        from .manager import resolve_project_root

        return resolve_project_root()

    @abstractmethod
    def _config_section(self) -> str:
        """Return the dot-notation key of this domain's section."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's section, or an empty dict if it is absent."""
        current: Any = self._config
        for part in self._config_section().split("."):
            if not isinstance(current, dict):
                return {}
            current = current.get(part)
        return current if isinstance(current, dict) else {}


__all__ = ["BaseDomainConfig"]
