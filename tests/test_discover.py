from __future__ import annotations

import os
from pathlib import Path

from commit_calendar.errors import TraversalError
from commit_calendar.git import discover_git_roots


def _make_repo_dirs(root: Path, *rels: str) -> None:
    for rel in rels:
        (root / rel / ".git").mkdir(parents=True)


def test_discover_git_roots_finds_repos_and_skips_node_modules(tmp_path: Path) -> None:
    _make_repo_dirs(tmp_path, "a", "a/sub", "b/nested", "node_modules/pkg", "b/node_modules/dep")
    # Anything below a .git directory is never visited.
    (tmp_path / "a" / ".git" / "inner" / ".git").mkdir(parents=True)
    # Worktrees and submodules use a .git file.
    (tmp_path / "wt").mkdir()
    (tmp_path / "wt" / ".git").write_text("gitdir: ../a/.git\n", encoding="utf-8")
    (tmp_path / "plain" / "deeper").mkdir(parents=True)

    scan = discover_git_roots(tmp_path)

    assert scan.roots == [
        str(tmp_path / "a"),
        str(tmp_path / "a" / "sub"),
        str(tmp_path / "b" / "nested"),
        str(tmp_path / "wt"),
    ]
    assert scan.skipped == []


def test_discover_git_roots_custom_exclude_dirnames(tmp_path: Path) -> None:
    _make_repo_dirs(tmp_path, "node_modules/pkg", "vendor/lib")

    scan = discover_git_roots(tmp_path, exclude_dirnames={"vendor"})

    assert scan.roots == [str(tmp_path / "node_modules" / "pkg")]


def test_discover_git_roots_missing_root_is_skipped_not_raised(tmp_path: Path) -> None:
    missing = tmp_path / "does-not-exist"

    scan = discover_git_roots(missing)

    assert scan.roots == []
    assert len(scan.skipped) == 1
    assert isinstance(scan.skipped[0], TraversalError)
    assert scan.skipped[0].path == str(missing)


def test_discover_git_roots_file_as_root(tmp_path: Path) -> None:
    f = tmp_path / "file.txt"
    f.write_text("x\n", encoding="utf-8")

    scan = discover_git_roots(f)

    assert scan.roots == []
    assert [e.path for e in scan.skipped] == [str(f)]


def test_discover_git_roots_does_not_follow_symlinks(tmp_path: Path) -> None:
    _make_repo_dirs(tmp_path, "real/repo")
    os.symlink(tmp_path / "real", tmp_path / "link")
    # A cycle back to the scan root must not loop forever.
    os.symlink(tmp_path, tmp_path / "real" / "loop")

    scan = discover_git_roots(tmp_path)

    assert scan.roots == [str(tmp_path / "real" / "repo")]


def test_discover_git_roots_keeps_walking_past_unreadable_subtree(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "a").mkdir()
    _make_repo_dirs(tmp_path, "b/hidden", "c/repo")
    blocked = tmp_path / "b"
    real_scandir = os.scandir

    def scandir(path):
        if Path(path) == blocked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)

    scan = discover_git_roots(tmp_path)

    assert scan.roots == [str(tmp_path / "c" / "repo")]
    assert [e.path for e in scan.skipped] == [str(blocked)]
    assert scan.skipped[0].reason == "Permission denied"
