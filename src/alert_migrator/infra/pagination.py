"""Pagers for draining GitHub collections.

Two styles are supported behind the same ``fetch_all(endpoint)`` shape:

- REST collections, where each response carries a ``Link`` header whose
  ``rel="next"`` entry points to the following page.
- GraphQL connections, where each response carries ``pageInfo`` with
  ``hasNextPage`` and an opaque ``endCursor`` passed back as ``after``.

Both return lazy generators: a page is requested only once the previous one
has been consumed, and each call starts again from the first page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Protocol

import requests

from ..core.domain.exceptions import GithubApiError


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        accept: str | None = None,
    ) -> requests.Response:
        ...

    def decode(self, response: requests.Response) -> Any:
        ...


@dataclass(frozen=True)
class LinkEndpoint:
    url: str
    params: dict[str, Any] | None = None


@dataclass(frozen=True)
class CursorEndpoint:
    url: str
    query: str
    collection: Callable[[dict[str, Any]], list[Any]]
    page_info: Callable[[dict[str, Any]], dict[str, Any] | None]
    variables: Mapping[str, Any] = field(default_factory=dict)
    first: int = 100


class LinkHeaderPager:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def fetch_all(self, endpoint: LinkEndpoint) -> Iterator[dict[str, Any]]:
        url: str | None = endpoint.url
        params = endpoint.params
        while url:
            response = self._transport.send("GET", url, params=params)
            page = self._transport.decode(response)
            if not isinstance(page, list):
                raise GithubApiError(
                    f"Expected a JSON array from {url}",
                    status_code=response.status_code,
                    url=url,
                )
            yield from page

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None


class CursorPager:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def fetch_all(self, endpoint: CursorEndpoint) -> Iterator[dict[str, Any]]:
        after: str | None = None

        while True:
            variables = {**endpoint.variables, "first": endpoint.first, "after": after}
            response = self._transport.send(
                "POST",
                endpoint.url,
                json={"query": endpoint.query, "variables": variables},
            )
            body = self._transport.decode(response)
            if not isinstance(body, dict):
                raise GithubApiError(f"Expected a JSON object from {endpoint.url}", url=endpoint.url)
            if body.get("errors"):
                raise GithubApiError(
                    f"GraphQL query failed: {body['errors']}",
                    status_code=response.status_code,
                    url=endpoint.url,
                )

            try:
                items = endpoint.collection(body)
                page_info = endpoint.page_info(body)
            except (KeyError, TypeError) as e:
                raise GithubApiError(f"Malformed GraphQL response: {e}", url=endpoint.url) from e
            yield from items

            if not page_info or not page_info.get("hasNextPage"):
                return
            after = page_info.get("endCursor")
            if not after:
                raise GithubApiError(
                    "Malformed GraphQL response: hasNextPage without endCursor",
                    url=endpoint.url,
                )
