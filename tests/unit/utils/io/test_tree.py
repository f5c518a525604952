from __future__ import annotations

import os
from pathlib import Path

import pytest

from launchkit.core.utils.io import (
    copy_to,
    read_file,
    read_file_text,
    recursive_copy_to,
    recursive_delete,
    recursive_list,
)
from helpers.config_utils import write_project_config


def _make_tree(root: Path) -> None:
    (root / "b" / "nested").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"alpha")
    (root / "b" / "c.bin").write_bytes(bytes(range(256)) * 40)
    (root / "b" / "nested" / "d.txt").write_text("delta", encoding="utf-8")
    (root / "empty").mkdir()


def _relative(nodes, root: Path):
    return [n.relative_to(root).as_posix() for n in nodes]


def test_recursive_list_is_preorder(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    _make_tree(root)

    nodes = recursive_list(root)

    assert nodes[0] == root
    assert _relative(nodes, root) == [
        ".",
        "a.txt",
        "b",
        "b/c.bin",
        "b/nested",
        "b/nested/d.txt",
        "empty",
    ]


def test_recursive_list_of_file_is_single_node(tmp_path: Path) -> None:
    f = tmp_path / "single.txt"
    f.write_text("x", encoding="utf-8")

    assert recursive_list(f) == [f]


def test_recursive_delete_removes_everything(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    _make_tree(root)

    recursive_delete(root)

    assert not root.exists()
    assert list(tmp_path.glob("tree*")) == []


def test_recursive_delete_is_idempotent(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    _make_tree(root)

    recursive_delete(root)
    recursive_delete(root)

    assert not root.exists()


def test_recursive_delete_missing_path_is_noop(tmp_path: Path) -> None:
    recursive_delete(tmp_path / "does-not-exist")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_recursive_delete_does_not_follow_symlinks(tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep", encoding="utf-8")
    root = tmp_path / "tree"
    root.mkdir()
    try:
        (root / "link").symlink_to(outside, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    recursive_delete(root)

    assert not root.exists()
    assert (outside / "keep.txt").read_text(encoding="utf-8") == "keep"


def test_recursive_delete_continues_after_failed_node(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = tmp_path / "tree"
    _make_tree(root)
    stuck = root / "a.txt"
    real_unlink = Path.unlink

    def flaky_unlink(self, *args, **kwargs):
        if self == stuck:
            raise PermissionError("locked")
        return real_unlink(self, *args, **kwargs)

    monkeypatch.setattr(Path, "unlink", flaky_unlink)

    recursive_delete(root)

    # Everything else is gone; the locked file and its parent remain.
    assert _relative(recursive_list(root), root) == [".", "a.txt"]


def test_recursive_copy_to_produces_identical_tree(tmp_path: Path) -> None:
    source = tmp_path / "source"
    target = tmp_path / "out" / "target"
    _make_tree(source)

    recursive_copy_to(source, target)

    source_nodes = recursive_list(source)
    target_nodes = recursive_list(target)
    assert _relative(source_nodes, source) == _relative(target_nodes, target)
    for s, t in zip(source_nodes, target_nodes):
        assert s.is_dir() == t.is_dir()
        if s.is_file():
            assert read_file(s) == read_file(t)


def test_recursive_copy_to_single_file(tmp_path: Path) -> None:
    source = tmp_path / "one.txt"
    source.write_bytes(b"payload")

    recursive_copy_to(source, tmp_path / "two.txt")

    assert (tmp_path / "two.txt").read_bytes() == b"payload"


def test_copy_to_returns_byte_count(tmp_path: Path) -> None:
    source = tmp_path / "src.bin"
    source.write_bytes(b"z" * 20000)

    assert copy_to(source, tmp_path / "dst.bin") == 20000
    assert (tmp_path / "dst.bin").read_bytes() == b"z" * 20000


def test_copy_to_missing_source_leaves_target_untouched(tmp_path: Path) -> None:
    target = tmp_path / "dst.txt"
    target.write_text("original", encoding="utf-8")

    with pytest.raises(FileNotFoundError):
        copy_to(tmp_path / "missing.txt", target)

    assert target.read_text(encoding="utf-8") == "original"


def test_read_file_text_uses_configured_charset(tmp_path: Path, isolated_project_env: Path) -> None:
    f = tmp_path / "latin.txt"
    f.write_bytes("café".encode("latin-1"))

    write_project_config(isolated_project_env, {"launcher": {"io": {"charset": "latin-1"}}})

    assert read_file_text(f) == "café"
    assert read_file_text(f, charset="latin-1") == "café"


def test_read_file_text_defaults_to_utf8(tmp_path: Path) -> None:
    f = tmp_path / "utf8.txt"
    f.write_bytes("naïve".encode("utf-8"))

    assert read_file_text(f) == "naïve"
