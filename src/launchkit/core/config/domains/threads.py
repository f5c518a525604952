"""Domain-specific configuration for the background worker pool."""
from __future__ import annotations

from functools import cached_property

from launchkit.core.exceptions import ConfigError

from ..base import BaseDomainConfig

DEFAULT_POOL_SIZE = 16
DEFAULT_IDLE_TIMEOUT_SECONDS = 30.0
DEFAULT_THREAD_NAME = "blocking task"


class ThreadsConfig(BaseDomainConfig):
    """Settings under ``launcher.thread``.

    ``pool`` is the process-wide ``launcher.thread.pool`` setting.
    """

    def _config_section(self) -> str:
        return "launcher.thread"

    @cached_property
    def pool_size(self) -> int:
        raw = self.section.get("pool", DEFAULT_POOL_SIZE)
        try:
            size = int(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"launcher.thread.pool must be an integer, got {raw!r}",
                context={"key": "launcher.thread.pool", "value": raw},
            ) from exc
        if size < 1:
            raise ConfigError(
                f"launcher.thread.pool must be at least 1, got {size}",
                context={"key": "launcher.thread.pool", "value": raw},
            )
        return size

    @cached_property
    def idle_timeout_seconds(self) -> float:
        return float(self.section.get("idle_timeout_seconds", DEFAULT_IDLE_TIMEOUT_SECONDS))

    @cached_property
    def thread_name(self) -> str:
        return str(self.section.get("name") or DEFAULT_THREAD_NAME)


__all__ = ["ThreadsConfig", "DEFAULT_POOL_SIZE", "DEFAULT_IDLE_TIMEOUT_SECONDS"]
