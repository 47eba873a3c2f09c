from __future__ import annotations

import dataclasses
import datetime as dt

from .errors import TraversalError


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    sha: str
    author_name: str
    author_email: str
    authored_at: dt.datetime  # carries the author's own UTC offset


@dataclasses.dataclass
class ScanResult:
    roots: list[str] = dataclasses.field(default_factory=list)
    skipped: list[TraversalError] = dataclasses.field(default_factory=list)
