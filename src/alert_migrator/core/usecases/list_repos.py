from __future__ import annotations

from ..ports import GithubApiPort


class ListRepositoriesUseCase:
    def __init__(self, *, api: GithubApiPort) -> None:
        self._api = api

    def execute(self, *, org: str, limit: int | None = None) -> list[str]:
        names: list[str] = []
        for name in self._api.get_repositories(org):
            names.append(name)
            if limit and len(names) >= limit:
                break
        return names
