from __future__ import annotations

import logging
from pathlib import Path

from launchkit.core.config.domains import LoggingConfig
from launchkit.core.stdlib_logging import configure_from_config, configure_stdlib_logging
from helpers.config_utils import write_project_config


def test_logging_disabled_by_default() -> None:
    assert LoggingConfig().enabled is False
    assert configure_from_config() is False


def test_relative_log_path_resolves_under_project(isolated_project_env: Path) -> None:
    write_project_config(
        isolated_project_env,
        {"logging": {"stdlib": {"enabled": True, "level": "DEBUG", "path": "logs/launchkit.log"}}},
    )

    assert LoggingConfig().resolve_log_path() == isolated_project_env / "logs" / "launchkit.log"


def test_configure_from_config_writes_records(isolated_project_env: Path) -> None:
    write_project_config(
        isolated_project_env,
        {"logging": {"stdlib": {"enabled": True, "level": "DEBUG", "path": "logs/launchkit.log"}}},
    )

    assert configure_from_config() is True
    logging.getLogger("launchkit.test").debug("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    log_file = isolated_project_env / "logs" / "launchkit.log"
    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_configure_stdlib_logging_is_idempotent(tmp_path: Path) -> None:
    log_path = tmp_path / "out.log"

    configure_stdlib_logging(log_path=log_path)
    before = list(logging.getLogger().handlers)
    configure_stdlib_logging(log_path=log_path)

    assert logging.getLogger().handlers == before
