from __future__ import annotations

from typing import Any, Iterator, Protocol

from .domain.models import Alert, CodeScanningAnalysis, SarifUpload


class PagerPort(Protocol):
    """Port for draining a paginated remote collection.

    Implementations differ only in how the next page is located (Link header
    or GraphQL cursor). The returned iterator is lazy and single-pass; calling
    ``fetch_all`` again restarts from the first page.
    """

    def fetch_all(self, endpoint: Any) -> Iterator[dict[str, Any]]:
        ...


class GithubApiPort(Protocol):
    """Port for the GitHub REST/GraphQL operations used by migrations."""

    def get_default_branch(self, owner: str, repo: str) -> str:
        ...

    def get_code_scanning_analyses(
        self, owner: str, repo: str, ref: str | None = None
    ) -> Iterator[CodeScanningAnalysis]:
        ...

    def get_sarif_report(self, owner: str, repo: str, analysis_id: int) -> str:
        ...

    def upload_sarif_report(self, owner: str, repo: str, upload: SarifUpload) -> None:
        """Upload a SARIF report.

        Raises:
            CommitNotFoundError: If the referenced commit does not exist on the target
            GithubApiError: On any other failure
        """
        ...

    def get_code_scanning_alerts(
        self, owner: str, repo: str, ref: str | None = None
    ) -> Iterator[Alert]:
        ...

    def update_code_scanning_alert(
        self,
        owner: str,
        repo: str,
        number: int,
        state: str,
        dismissed_reason: str | None = None,
        dismissed_comment: str | None = None,
    ) -> None:
        ...

    def get_secret_scanning_alerts(self, owner: str, repo: str) -> Iterator[Alert]:
        ...

    def update_secret_scanning_alert(
        self,
        owner: str,
        repo: str,
        number: int,
        state: str,
        resolution: str | None = None,
        resolution_comment: str | None = None,
    ) -> None:
        ...

    def get_repositories(self, org: str) -> Iterator[str]:
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Keyword arguments are attached to the record as structured fields.
    """

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        ...

    def exception(self, message: str, **kwargs: Any) -> None:
        ...
