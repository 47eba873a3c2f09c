from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable

from .errors import RepoError
from .git import iter_commits, open_repo, resolve_head
from .models import CommitRecord
from .store import RepoStore
from .window import date_key, empty_tally

_LOG = logging.getLogger(__name__)


def tally_commits(tally: dict[str, int], commits: Iterable[CommitRecord], email: str | None = None) -> int:
    """
    Count `commits` into `tally` by author day, skipping days outside the tally.

    Returns how many commits were counted.
    """
    counted = 0
    for c in commits:
        if email and c.author_email != email:
            continue
        key = date_key(c.authored_at)
        if key not in tally:
            continue
        tally[key] += 1
        counted += 1
    return counted


def aggregate_commits(
    repo_paths: Iterable[str],
    email: str | None = None,
    *,
    today: dt.date | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, int]:
    log = logger or _LOG
    tally = empty_tally(today)

    for path in repo_paths:
        log.info("Getting git commit history for %s", path)
        try:
            repo = open_repo(path)
            head = resolve_head(repo)
        except RepoError as e:
            log.error("Skipping repo %s", e)
            continue
        counted = tally_commits(tally, iter_commits(repo, head, logger=log), email)
        log.debug("Counted %d commits in window for %s", counted, path)

    return tally


def aggregate_store(
    store: RepoStore,
    email: str | None = None,
    *,
    today: dt.date | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, int]:
    return aggregate_commits(store.load(), email, today=today, logger=logger)
