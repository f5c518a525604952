"""Typed accessors for launchkit settings sections."""
from __future__ import annotations

from .filter import FilterConfig
from .io import IOConfig
from .logging import LoggingConfig
from .threads import ThreadsConfig

__all__ = ["FilterConfig", "IOConfig", "LoggingConfig", "ThreadsConfig"]
