"""Text processing utilities for launchkit."""
from __future__ import annotations

from .filters import (
    PLACEHOLDER_RE,
    as_string_mapping,
    filter_placeholders,
    filter_structure,
    translate,
)

__all__ = [
    "PLACEHOLDER_RE",
    "translate",
    "filter_placeholders",
    "filter_structure",
    "as_string_mapping",
]
