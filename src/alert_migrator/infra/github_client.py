from __future__ import annotations

import threading
from typing import Any, Callable

import requests

from .. import __version__
from ..core.domain.exceptions import GithubApiError
from ..core.ports import LoggerPort


DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"


def graphql_url(api_url: str) -> str:
    """Derive the GraphQL endpoint from a REST API base URL.

    github.com serves GraphQL at ``/graphql`` next to the REST API, while
    GitHub Enterprise Server uses ``/api/graphql`` instead of ``/api/v3``.
    """
    base = api_url.rstrip("/")
    if base.endswith("/api/v3"):
        return base[: -len("/v3")] + "/graphql"
    return base + "/graphql"


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return str(body)[:200]


class GithubClient:
    """Authenticated HTTP transport for one GitHub instance.

    Every failure (connection error, non-2xx status, undecodable body) is
    raised as GithubApiError carrying the status code when there is one.

    Each thread gets its own requests.Session built by ``session_factory``.
    A ``session`` passed in explicitly is shared by all threads.
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        token: str | None,
        logger: LoggerPort,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        session: requests.Session | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._logger = logger
        self._verify_ssl = verify_ssl
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": f"alert-migrator/{__version__}",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._session_factory = session_factory
        self._local = threading.local()
        self._shared = self._prepare(session) if session is not None else None

    def _prepare(self, session: requests.Session) -> requests.Session:
        session.verify = self._verify_ssl
        session.headers.update(self._headers)
        return session

    @property
    def session(self) -> requests.Session:
        if self._shared is not None:
            return self._shared
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = self._prepare(self._session_factory())
        return session

    @property
    def api_url(self) -> str:
        return self._api_url

    def url(self, path: str) -> str:
        return f"{self._api_url}/{path.lstrip('/')}"

    def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        accept: str | None = None,
    ) -> requests.Response:
        """Issue a request and return the response if it succeeded.

        Raises:
            GithubApiError: On connection failure or non-success status
        """
        url = url.replace(" ", "%20")
        headers = {"Accept": accept} if accept else None
        self._logger.debug("http_request", method=method, url=url, params=params)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise GithubApiError(f"{method} {url} failed: {e}", url=url) from e

        self._logger.debug(
            "http_response",
            method=method,
            url=url,
            status_code=response.status_code,
            request_id=response.headers.get("X-GitHub-Request-Id"),
        )

        if not response.ok:
            raise GithubApiError(
                f"{method} {url} returned {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GithubApiError(
                f"Malformed JSON response from {response.url}",
                status_code=response.status_code,
                url=response.url,
            ) from e

    def get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return self.decode(self.send("GET", self.url(path), params=params))

    def get_text(self, path: str, *, accept: str) -> str:
        return self.send("GET", self.url(path), accept=accept).text

    def post(self, path: str, body: Any) -> Any:
        response = self.send("POST", self.url(path), json=body)
        return self.decode(response) if response.content else None

    def patch(self, path: str, body: Any) -> Any:
        response = self.send("PATCH", self.url(path), json=body)
        return self.decode(response) if response.content else None
