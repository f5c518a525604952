"""Domain-specific configuration for stdlib logging output.

This config controls whether launchkit installs a file handler on the root
logger, at which level, and where the log file lives.
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging.stdlib"

    @cached_property
    def enabled(self) -> bool:
        return bool(self.section.get("enabled", False))

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "INFO") or "INFO")

    @cached_property
    def path_template(self) -> str:
        return str(self.section.get("path", "") or "")

    def resolve_log_path(self) -> Optional[Path]:
        """Resolve the configured path; relative paths are under the project root."""
        if not self.path_template:
            return None
        path = Path(self.path_template).expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path


__all__ = ["LoggingConfig"]
