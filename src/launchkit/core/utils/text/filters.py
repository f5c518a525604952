"""Placeholder substitution for configuration strings.

Two algorithms over a string and a key -> value mapping:

- ``translate``: literal prefix replacement in a single left-to-right pass.
- ``filter_placeholders``: ``${name}`` token substitution, where replaced
  values may themselves contain tokens.

Neither mutates its inputs, and unresolved tokens are not errors.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from launchkit.core.exceptions import FilterRecursionError

PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


def translate(value: str, translations: Mapping[str, str]) -> str:
    """Replace every occurrence of a mapping key, scanning left to right.

    At each position the longest key that is a prefix of the remaining text
    wins; its replacement is emitted and the scan skips the key. Otherwise
    the current character is copied. Replacements are never rescanned.
    Empty keys are ignored.

    Example:
        >>> translate("abcabc", {"ab": "X"})
        'XcXc'
    """
    keys = sorted((k for k in translations if k), key=len, reverse=True)
    out = []
    pos = 0
    while pos < len(value):
        for key in keys:
            if value.startswith(key, pos):
                out.append(translations[key])
                pos += len(key)
                break
        else:
            out.append(value[pos])
            pos += 1
    return "".join(out)


def _max_substitutions() -> int:
    from launchkit.core.config.domains.filter import FilterConfig

    return FilterConfig().max_substitutions


def filter_placeholders(
    value: str,
    props: Mapping[str, str],
    *,
    max_substitutions: Optional[int] = None,
) -> str:
    """Substitute ``${name}`` tokens with values from ``props``.

    After each substitution the scan restarts from the beginning of the
    string, so tokens inside substituted values are resolved too. Tokens
    whose name is not in ``props`` are left as-is and skipped.

    Args:
        value: Text containing ``${name}`` tokens
        props: Token values by name
        max_substitutions: Bound on substitutions for this call. Defaults to
            ``launcher.filter.max_substitutions``.

    Raises:
        FilterRecursionError: If the bound is exceeded, e.g. because a
            value refers to itself.

    Example:
        >>> filter_placeholders("${a}-${b}", {"a": "1", "b": "2"})
        '1-2'
        >>> filter_placeholders("${missing}", {})
        '${missing}'
    """
    limit = _max_substitutions() if max_substitutions is None else max_substitutions
    rc = value
    start = 0
    count = 0
    while True:
        match = PLACEHOLDER_RE.search(rc, start)
        if match is None:
            return rc
        name = match.group(1)
        if name not in props:
            start = match.end()
            continue
        count += 1
        if count > limit:
            raise FilterRecursionError(
                f"More than {limit} substitutions while filtering; is '{name}' self-referencing?",
                context={"placeholder": name, "limit": limit},
            )
        rc = rc[: match.start()] + str(props[name]) + rc[match.end():]
        start = 0


def filter_structure(obj: Any, props: Mapping[str, str]) -> Any:
    """Recursively apply :func:`filter_placeholders` to nested dict/list data."""
    if isinstance(obj, dict):
        return {k: filter_structure(v, props) for k, v in obj.items()}
    if isinstance(obj, list):
        return [filter_structure(v, props) for v in obj]
    if isinstance(obj, str):
        return filter_placeholders(obj, props)
    return obj


def as_string_mapping(source: Mapping[Any, Any]) -> Dict[str, str]:
    """Copy any mapping (``os.environ``, a ``configparser`` section, ...) into ``str -> str``."""
    return {str(k): str(v) for k, v in source.items()}


__all__ = [
    "PLACEHOLDER_RE",
    "translate",
    "filter_placeholders",
    "filter_structure",
    "as_string_mapping",
]
