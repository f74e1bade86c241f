from __future__ import annotations

import base64
import gzip
from datetime import datetime
from typing import Any, Callable, Iterator, TypeVar

from ..core.domain.exceptions import CommitNotFoundError, GithubApiError
from ..core.domain.models import (
    Alert,
    CodeScanningAnalysis,
    Fingerprint,
    Location,
    SarifUpload,
)
from ..core.ports import PagerPort
from .github_client import GithubClient, graphql_url
from .pagination import CursorEndpoint, CursorPager, LinkEndpoint, LinkHeaderPager


T = TypeVar("T")

SARIF_MEDIA_TYPE = "application/sarif+json"

REPOSITORIES_QUERY = """
query($login: String!, $first: Int, $after: String) {
  organization(login: $login) {
    repositories(first: $first, after: $after, orderBy: {field: NAME, direction: ASC}) {
      pageInfo { endCursor hasNextPage }
      nodes { name }
    }
  }
}
"""


def parse_timestamp(value: str) -> datetime:
    """Parse GitHub's ISO-8601 timestamps (``2022-03-30T00:00:00Z``)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def encode_sarif(sarif: str) -> str:
    """gzip + base64, as required by the SARIF upload endpoint."""
    return base64.b64encode(gzip.compress(sarif.encode("utf-8"))).decode("ascii")


def parse_analysis(item: dict[str, Any]) -> CodeScanningAnalysis:
    tool = item.get("tool") or {}
    return CodeScanningAnalysis(
        id=item["id"],
        created_at=parse_timestamp(item["created_at"]),
        ref=item["ref"],
        commit_sha=item["commit_sha"],
        category=item.get("category"),
        tool_name=tool.get("name"),
    )


def parse_code_scanning_alert(item: dict[str, Any]) -> Alert:
    rule = item.get("rule") or {}
    instance = item.get("most_recent_instance") or {}
    location = instance.get("location")

    locations: tuple[Location, ...] = ()
    if location:
        locations = (
            Location(
                path=location.get("path"),
                start_line=location.get("start_line"),
                end_line=location.get("end_line"),
                start_column=location.get("start_column"),
                end_column=location.get("end_column"),
            ),
        )

    return Alert(
        number=item["number"],
        url=item["url"],
        state=item["state"],
        resolution_reason=item.get("dismissed_reason"),
        resolution_comment=item.get("dismissed_comment"),
        fingerprint=Fingerprint(natural_key=(rule.get("id"),), locations=locations),
    )


def parse_secret_location(item: dict[str, Any]) -> Location | None:
    """Convert a secret scanning location; non-commit locations return None.

    Issue, pull request and wiki locations reference URLs that differ between
    the two instances and cannot be compared.
    """
    if item.get("type", "commit") != "commit":
        return None
    details = item.get("details") or {}
    return Location(
        path=details.get("path"),
        start_line=details.get("start_line"),
        end_line=details.get("end_line"),
        start_column=details.get("start_column"),
        end_column=details.get("end_column"),
        blob_sha=details.get("blob_sha"),
    )


def parse_secret_scanning_alert(item: dict[str, Any], locations: list[dict[str, Any]]) -> Alert:
    parsed = tuple(loc for loc in (parse_secret_location(raw) for raw in locations) if loc is not None)
    return Alert(
        number=item["number"],
        url=item["url"],
        state=item["state"],
        resolution_reason=item.get("resolution"),
        resolution_comment=item.get("resolution_comment"),
        fingerprint=Fingerprint(
            natural_key=(item.get("secret_type"), item.get("secret")),
            locations=parsed,
        ),
    )


class GithubApi:
    """GitHub REST/GraphQL operations needed to migrate scanning results."""

    def __init__(self, *, client: GithubClient, per_page: int = 100) -> None:
        self._client = client
        self._per_page = per_page
        self._links: PagerPort = LinkHeaderPager(client)
        self._cursor: PagerPort = CursorPager(client)

    def _parse(self, parser: Callable[..., T], *args: Any) -> T:
        try:
            return parser(*args)
        except (KeyError, TypeError, ValueError) as e:
            raise GithubApiError(f"Malformed response from {self._client.api_url}: {e!r}") from e

    def _paged(self, path: str, **params: Any) -> Iterator[dict[str, Any]]:
        query = {"per_page": self._per_page}
        query.update({k: v for k, v in params.items() if v is not None})
        return self._links.fetch_all(LinkEndpoint(url=self._client.url(path), params=query))

    def get_default_branch(self, owner: str, repo: str) -> str:
        data = self._client.get_json(f"/repos/{owner}/{repo}")
        return self._parse(lambda d: d["default_branch"], data)

    def get_code_scanning_analyses(
        self, owner: str, repo: str, ref: str | None = None
    ) -> Iterator[CodeScanningAnalysis]:
        for item in self._paged(f"/repos/{owner}/{repo}/code-scanning/analyses", ref=ref):
            yield self._parse(parse_analysis, item)

    def get_sarif_report(self, owner: str, repo: str, analysis_id: int) -> str:
        return self._client.get_text(
            f"/repos/{owner}/{repo}/code-scanning/analyses/{analysis_id}",
            accept=SARIF_MEDIA_TYPE,
        )

    def upload_sarif_report(self, owner: str, repo: str, upload: SarifUpload) -> None:
        body = {
            "commit_sha": upload.commit_sha,
            "ref": upload.ref,
            "sarif": encode_sarif(upload.sarif),
        }
        try:
            self._client.post(f"/repos/{owner}/{repo}/code-scanning/sarifs", body)
        except GithubApiError as e:
            if e.is_not_found:
                raise CommitNotFoundError(str(e), status_code=e.status_code, url=e.url) from e
            raise

    def get_code_scanning_alerts(
        self, owner: str, repo: str, ref: str | None = None
    ) -> Iterator[Alert]:
        for item in self._paged(f"/repos/{owner}/{repo}/code-scanning/alerts", ref=ref):
            yield self._parse(parse_code_scanning_alert, item)

    def update_code_scanning_alert(
        self,
        owner: str,
        repo: str,
        number: int,
        state: str,
        dismissed_reason: str | None = None,
        dismissed_comment: str | None = None,
    ) -> None:
        body: dict[str, Any] = {"state": state}
        if state == "dismissed":
            body["dismissed_reason"] = dismissed_reason
            if dismissed_comment:
                body["dismissed_comment"] = dismissed_comment
        self._client.patch(f"/repos/{owner}/{repo}/code-scanning/alerts/{number}", body)

    def get_secret_scanning_alerts(self, owner: str, repo: str) -> Iterator[Alert]:
        for item in self._paged(f"/repos/{owner}/{repo}/secret-scanning/alerts"):
            number = self._parse(lambda d: d["number"], item)
            locations = list(self._paged(f"/repos/{owner}/{repo}/secret-scanning/alerts/{number}/locations"))
            yield self._parse(parse_secret_scanning_alert, item, locations)

    def update_secret_scanning_alert(
        self,
        owner: str,
        repo: str,
        number: int,
        state: str,
        resolution: str | None = None,
        resolution_comment: str | None = None,
    ) -> None:
        body: dict[str, Any] = {"state": state}
        if state == "resolved":
            body["resolution"] = resolution
            if resolution_comment:
                body["resolution_comment"] = resolution_comment
        self._client.patch(f"/repos/{owner}/{repo}/secret-scanning/alerts/{number}", body)

    def get_repositories(self, org: str) -> Iterator[str]:
        endpoint = CursorEndpoint(
            url=graphql_url(self._client.api_url),
            query=REPOSITORIES_QUERY,
            variables={"login": org},
            collection=lambda body: body["data"]["organization"]["repositories"]["nodes"],
            page_info=lambda body: body["data"]["organization"]["repositories"]["pageInfo"],
            first=self._per_page,
        )
        for node in self._cursor.fetch_all(endpoint):
            yield self._parse(lambda n: n["name"], node)
