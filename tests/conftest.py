import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'launchkit'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_launchkit_caches
from launchkit.core.utils.pool import WorkerPool


@pytest.fixture(autouse=True)
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project environment for tests.

    Settings resolve against a fresh project root and an empty home
    directory, so developer ~/.launchkit files and LAUNCHKIT_* variables
    never leak into a test.
    """
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()

    for key in list(os.environ):
        if key.startswith("LAUNCHKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("LAUNCHKIT_PROJECT_ROOT", str(project))
    monkeypatch.chdir(project)

    reset_launchkit_caches()
    yield project
    reset_launchkit_caches()


@pytest.fixture
def pool():
    """A small private worker pool, shut down after the test."""
    p = WorkerPool(max_workers=8, idle_timeout=5.0, thread_name="test-pool")
    yield p
    p.shutdown(wait=True)
