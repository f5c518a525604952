"""Domain-specific configuration for stream and file I/O."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class IOConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "launcher.io"

    @cached_property
    def charset(self) -> str:
        """Text charset used when decoding file content."""
        return str(self.section.get("charset") or "utf-8")

    @cached_property
    def buffer_size(self) -> int:
        return int(self.section.get("buffer_size", 8192))

    @cached_property
    def drain_timeout_seconds(self) -> float:
        """Seconds to wait for output redirection after a child exits."""
        return float(self.section.get("drain_timeout_seconds", 5))


__all__ = ["IOConfig"]
