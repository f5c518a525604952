"""Domain-specific configuration for placeholder substitution."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class FilterConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "launcher.filter"

    @cached_property
    def max_substitutions(self) -> int:
        return int(self.section.get("max_substitutions", 10000))


__all__ = ["FilterConfig"]
