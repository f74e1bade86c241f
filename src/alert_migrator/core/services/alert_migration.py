from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable

from ..domain.models import Alert, RunSummary
from ..ports import LoggerPort
from .matcher import FindingMatcher
from .synchronizer import StateSynchronizer, UpdateFn


FetchFn = Callable[[], Iterable[Alert]]


def fetch_concurrently(fetch_source: FetchFn, fetch_target: FetchFn) -> tuple[list[Alert], list[Alert]]:
    """Drain both alert collections in parallel and join before returning.

    Each fetch paginates sequentially on its own thread. An error from either
    side is re-raised here.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        source_future = pool.submit(lambda: list(fetch_source()))
        target_future = pool.submit(lambda: list(fetch_target()))
        return source_future.result(), target_future.result()


class AlertMigrationService:
    """Fetches, matches and reconciles alert states between two repositories.

    Shared by the code scanning and secret scanning flows, which differ only
    in how alerts are fetched and updated and which states are migratable.
    """

    def __init__(self, *, logger: LoggerPort, max_workers: int = 1) -> None:
        self._logger = logger
        self._max_workers = max_workers

    def migrate(
        self,
        *,
        fetch_source: FetchFn,
        fetch_target: FetchFn,
        matcher: FindingMatcher,
        update_fn: UpdateFn,
        dry_run: bool = False,
    ) -> RunSummary:
        sources, targets = fetch_concurrently(fetch_source, fetch_target)
        self._logger.info("alerts_fetched", source_count=len(sources), target_count=len(targets))

        matches = matcher.match(sources, targets)

        synchronizer = StateSynchronizer(
            logger=self._logger,
            update_fn=update_fn,
            max_workers=self._max_workers,
        )
        reconciled = synchronizer.reconcile_all(matches, dry_run=dry_run)

        # Sources dropped by the matcher as non-migratable count as skipped
        summary = RunSummary(skipped=len(sources) - len(matches), total=len(sources)) + reconciled
        self._logger.info("alerts_done", **summary.to_dict())
        return summary
