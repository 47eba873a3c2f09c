from __future__ import annotations

import datetime as dt
import logging
import os
import subprocess
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import HeadResolutionError, RepoOpenError, TraversalError
from .models import CommitRecord, ScanResult

GIT_DIRNAME = ".git"
DEFAULT_EXCLUDE_DIRNAMES = frozenset({"node_modules"})

_LOG = logging.getLogger(__name__)


def run_git(args: list[str], cwd: Path, timeout_s: int = 60) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def discover_git_roots(
    root: str | Path,
    exclude_dirnames: Iterable[str] = DEFAULT_EXCLUDE_DIRNAMES,
    logger: logging.Logger | None = None,
) -> ScanResult:
    """
    Walk `root` and collect every directory holding a `.git` entry.

    The `.git` entry itself is never entered, symlinked directories are not
    followed, and directories named in `exclude_dirnames` are pruned. A
    directory that cannot be listed is recorded in `ScanResult.skipped` and the
    walk carries on with the rest of the tree.
    """
    log = logger or _LOG
    excluded = set(exclude_dirnames)
    result = ScanResult()

    stack: list[Path] = [Path(root)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            err = TraversalError(str(current), e.strerror or str(e))
            log.debug("Skipping %s", err)
            result.skipped.append(err)
            continue

        subdirs: list[Path] = []
        for entry in entries:
            if entry.name == GIT_DIRNAME:
                log.info("Found git repo: %s", current)
                result.roots.append(str(current))
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir and entry.name not in excluded:
                subdirs.append(current / entry.name)
        # Pushed in reverse so siblings are visited in name order.
        stack.extend(reversed(subdirs))

    return result


def open_repo(path: str | Path) -> Path:
    repo = Path(path)
    if not repo.is_dir():
        raise RepoOpenError(str(path), "no such directory")
    if not (repo / GIT_DIRNAME).exists():
        raise RepoOpenError(str(path), "not a git repository")
    try:
        code, out, err = run_git(["rev-parse", "--show-toplevel"], cwd=repo)
    except (OSError, subprocess.SubprocessError) as e:
        raise RepoOpenError(str(path), str(e)) from e
    if code != 0:
        raise RepoOpenError(str(path), err.strip() or f"git rev-parse exited {code}")
    # A broken .git entry lets git fall through to an enclosing repository.
    if Path(out.strip()).resolve() != repo.resolve():
        raise RepoOpenError(str(path), f"resolves to enclosing repository {out.strip()}")
    return repo


def resolve_head(repo: Path) -> str:
    try:
        code, out, err = run_git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
    except (OSError, subprocess.SubprocessError) as e:
        raise HeadResolutionError(str(repo), str(e)) from e
    sha = out.strip()
    if code != 0 or not sha:
        raise HeadResolutionError(str(repo), err.strip() or "HEAD does not point at a commit")
    return sha


def _parse_log_line(line: str) -> CommitRecord | None:
    parts = line.split("\t", 3)
    if len(parts) != 4:
        return None
    sha, email, iso, name = parts
    s = iso.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        when = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    return CommitRecord(sha=sha, author_name=name, author_email=email, authored_at=when)


def iter_commits(repo: Path, head: str, logger: logging.Logger | None = None) -> Iterator[CommitRecord]:
    """
    Lazily yield the commits reachable from `head`, newest first.

    A failing `git log` never raises: what was read before the failure is kept
    and the failure is logged as a warning.
    """
    log = logger or _LOG
    cmd = ["git", "log", "--format=%H%x09%ae%x09%aI%x09%an", head, "--"]

    with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=str(repo),
                stdout=subprocess.PIPE,
                stderr=stderr_file,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            log.warning("Failed to start git log in %s: %s", repo, e)
            return

        try:
            assert proc.stdout is not None
            for raw_line in proc.stdout:
                line = raw_line.rstrip("\n")
                if not line:
                    continue
                commit = _parse_log_line(line)
                if commit is None:
                    log.debug("Unparseable git log line in %s: %r", repo, line)
                    continue
                yield commit
            code = proc.wait()
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            if proc.stdout is not None:
                proc.stdout.close()

        if code != 0:
            stderr_file.seek(0)
            stderr = stderr_file.read(500).strip()
            log.warning("git log exited %s in %s: %s", code, repo, stderr)
