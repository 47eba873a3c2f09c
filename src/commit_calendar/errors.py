from __future__ import annotations


class CommitCalendarError(Exception):
    pass


class TraversalError(CommitCalendarError):
    """A directory that could not be listed during repo discovery."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read directory {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreIOError(CommitCalendarError):
    pass


class RepoError(CommitCalendarError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class RepoOpenError(RepoError):
    pass


class HeadResolutionError(RepoError):
    pass
