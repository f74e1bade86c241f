"""Domain exceptions for alert_migrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import RunSummary


class GithubApiError(Exception):
    """Raised when a GitHub API call fails.

    Covers non-success HTTP responses as well as connection-level failures
    (``status_code`` is None for the latter). The replicator attaches the
    summary accumulated so far as ``partial_summary`` before re-raising.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        self.partial_summary: RunSummary | None = None
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class CommitNotFoundError(GithubApiError):
    """Raised when the target rejects a SARIF upload for an unknown commit.

    This is the expected steady state while the target history lags behind
    the source, so callers count it and continue.
    """
