from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED_LOG_PATH: str | None = None
_LAUNCHKIT_FILE_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Configure Python stdlib logging to write to `log_path` (no stderr handler).

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _LAUNCHKIT_FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _LAUNCHKIT_FILE_HANDLER is not None:
        return

    Path(resolved).parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    # FileHandler is also a StreamHandler: only drop the stdout/stderr ones.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            h.close()

    if _LAUNCHKIT_FILE_HANDLER is not None:
        root.removeHandler(_LAUNCHKIT_FILE_HANDLER)
        _LAUNCHKIT_FILE_HANDLER.close()
        _LAUNCHKIT_FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"))
    root.addHandler(fh)

    _LAUNCHKIT_FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def configure_from_config(repo_root: Optional[Path] = None) -> bool:
    """Apply the ``logging.stdlib`` settings.

    Returns:
        bool: True when a file handler was installed.
    """
    from launchkit.core.config.domains.logging import LoggingConfig

    cfg = LoggingConfig(repo_root=repo_root)
    log_path = cfg.resolve_log_path()
    if not cfg.enabled or log_path is None:
        return False
    configure_stdlib_logging(log_path=log_path, level=cfg.level)
    return True


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the launchkit file handler."""
    global _CONFIGURED_LOG_PATH, _LAUNCHKIT_FILE_HANDLER
    if _LAUNCHKIT_FILE_HANDLER is not None:
        logging.getLogger().removeHandler(_LAUNCHKIT_FILE_HANDLER)
        _LAUNCHKIT_FILE_HANDLER.close()
    _CONFIGURED_LOG_PATH = None
    _LAUNCHKIT_FILE_HANDLER = None


__all__ = ["configure_stdlib_logging", "configure_from_config", "reset_stdlib_logging_for_tests"]
