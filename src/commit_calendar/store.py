from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from .errors import StoreIOError

DEFAULT_STORE_FILENAME = "repos.txt"


class RepoStore:
    """
    Append-only list of repository paths, one per line.

    Lines already in the file are never rewritten; `add` only appends paths
    that are not present yet.
    """

    def __init__(self, path: str | Path = DEFAULT_STORE_FILENAME) -> None:
        self.path = Path(path)

    def _read_text(self) -> str | None:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreIOError(f"failed to read repo list {self.path}: {e}") from e

    def load(self) -> list[str]:
        text = self._read_text()
        if text is None:
            return []
        return [line for line in text.splitlines() if line.strip()]

    def add(self, paths: Iterable[str]) -> list[str]:
        text = self._read_text()
        existing = set() if text is None else {line for line in text.splitlines() if line.strip()}

        new: list[str] = []
        for p in paths:
            p = str(p)
            if not p or p in existing:
                continue
            existing.add(p)
            new.append(p)
        if not new:
            return []

        try:
            with self.path.open("a", encoding="utf-8", newline="\n") as f:
                if text and not text.endswith("\n"):
                    f.write("\n")
                for p in new:
                    f.write(p + "\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise StoreIOError(f"failed to write repo list {self.path}: {e}") from e
        return new
