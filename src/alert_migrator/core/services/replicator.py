from __future__ import annotations

from typing import Callable, Iterable

from ..domain.exceptions import CommitNotFoundError, GithubApiError
from ..domain.models import CodeScanningAnalysis, Outcome, RunSummary
from ..ports import LoggerPort


UploadFn = Callable[[CodeScanningAnalysis], None]


def order_for_replay(analyses: Iterable[CodeScanningAnalysis]) -> list[CodeScanningAnalysis]:
    """Sort analyses oldest first; ``sorted`` is stable so ties keep fetch order."""
    return sorted(analyses, key=lambda a: a.created_at)


class ArtifactReplicator:
    """Replays code scanning analyses against the target one at a time.

    The target only accepts a SARIF upload once the referenced commit exists,
    and earlier uploads must be visible before later ones are processed, so
    uploads run strictly sequentially in ``created_at`` order.
    """

    def __init__(self, *, logger: LoggerPort) -> None:
        self._logger = logger

    def replicate(
        self,
        analyses: Iterable[CodeScanningAnalysis],
        upload_fn: UploadFn,
        *,
        dry_run: bool = False,
    ) -> RunSummary:
        """Upload every analysis via ``upload_fn``.

        Args:
            analyses: Analyses as fetched from the source (any order)
            upload_fn: Downloads and uploads one analysis; raises GithubApiError on failure
            dry_run: Only report what would be migrated

        Returns:
            Summary of the run

        Raises:
            GithubApiError: On any upload failure other than CommitNotFoundError.
                The summary so far is attached as ``partial_summary``.
        """
        ordered = order_for_replay(analyses)
        summary = RunSummary(total=len(ordered), dry_run=dry_run)

        if dry_run:
            self._logger.info("analyses_dry_run", total=summary.total)
            for analysis in ordered:
                self._logger.info(
                    "analysis_would_migrate",
                    analysis_id=analysis.id,
                    created_at=analysis.created_at.isoformat(),
                    ref=analysis.ref,
                    commit_sha=analysis.commit_sha,
                )
                summary = summary.record(Outcome.SUCCEEDED)
            return summary

        for analysis in ordered:
            summary = summary.record(self._replay_one(analysis, upload_fn, summary))
            self._logger.info("analyses_progress", handled=summary.handled, total=summary.total)

        return summary

    def _replay_one(
        self,
        analysis: CodeScanningAnalysis,
        upload_fn: UploadFn,
        summary: RunSummary,
    ) -> Outcome:
        try:
            upload_fn(analysis)
        except CommitNotFoundError:
            self._logger.debug(
                "analysis_commit_missing",
                analysis_id=analysis.id,
                commit_sha=analysis.commit_sha,
            )
            return Outcome.FAILED
        except GithubApiError as e:
            self._logger.warning(
                "analysis_upload_failed",
                analysis_id=analysis.id,
                status_code=e.status_code,
                error=str(e),
            )
            e.partial_summary = summary.record(Outcome.FAILED)
            raise

        self._logger.info("analysis_uploaded", analysis_id=analysis.id, commit_sha=analysis.commit_sha)
        return Outcome.SUCCEEDED
