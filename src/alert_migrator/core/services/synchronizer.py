from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from ..domain.exceptions import GithubApiError
from ..domain.models import MatchResult, Outcome, RunSummary, StateUpdate
from ..ports import LoggerPort


UpdateFn = Callable[[StateUpdate], None]


def plan_update(match: MatchResult) -> StateUpdate | None:
    """Decide which update, if any, brings the target in line with the source.

    Returns None for unmatched sources and for pairs whose state and
    resolution reason already agree.
    """
    target = match.target
    if target is None:
        return None
    source = match.source
    if (source.state, source.resolution_reason) == (target.state, target.resolution_reason):
        return None
    return StateUpdate(
        number=target.number,
        state=source.state,
        reason=source.resolution_reason,
        comment=source.resolution_comment,
    )


class StateSynchronizer:
    """Applies source alert states to matched target alerts.

    Every reconciliation is independent: a failed update is counted and
    logged, and the remaining pairs are still processed.
    """

    def __init__(self, *, logger: LoggerPort, update_fn: UpdateFn, max_workers: int = 1) -> None:
        self._logger = logger
        self._update_fn = update_fn
        self._max_workers = max(1, max_workers)

    def reconcile(self, match: MatchResult, *, dry_run: bool = False) -> Outcome:
        if match.target is None:
            return Outcome.SKIPPED

        update = plan_update(match)
        if update is None:
            self._logger.info(
                "already_aligned",
                alert_number=match.source.number,
                target_alert_number=match.target.number,
                state=match.target.state,
            )
            return Outcome.SKIPPED

        if dry_run:
            self._logger.info(
                "alert_would_update",
                alert_number=match.source.number,
                target_alert_number=update.number,
                state=update.state,
                reason=update.reason,
            )
            return Outcome.SUCCEEDED

        try:
            self._update_fn(update)
        except GithubApiError as e:
            self._logger.warning(
                "alert_update_failed",
                target_alert_number=update.number,
                status_code=e.status_code,
                error=str(e),
            )
            return Outcome.FAILED

        self._logger.info(
            "alert_updated",
            alert_number=match.source.number,
            target_alert_number=update.number,
            state=update.state,
            reason=update.reason,
        )
        return Outcome.SUCCEEDED

    def reconcile_all(self, matches: Sequence[MatchResult], *, dry_run: bool = False) -> RunSummary:
        """Reconcile all pairs and fold the outcomes into a summary.

        ``total`` is left at zero; callers own the count of source alerts.
        """
        summary = RunSummary(dry_run=dry_run)

        if self._max_workers == 1 or len(matches) <= 1:
            outcomes = [self.reconcile(m, dry_run=dry_run) for m in matches]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(lambda m: self.reconcile(m, dry_run=dry_run), matches))

        for outcome in outcomes:
            summary = summary.record(outcome)
        return summary
