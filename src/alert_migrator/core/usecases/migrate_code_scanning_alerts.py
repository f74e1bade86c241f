from __future__ import annotations

from ..domain.models import RunSummary, StateUpdate
from ..ports import GithubApiPort, LoggerPort
from ..services import AlertMigrationService, FindingMatcher


class MigrateCodeScanningAlertsUseCase:
    """Use case for aligning code scanning alert states (open/dismissed)."""

    def __init__(
        self,
        *,
        source_api: GithubApiPort,
        target_api: GithubApiPort,
        matcher: FindingMatcher,
        migration: AlertMigrationService,
        logger: LoggerPort,
    ) -> None:
        self._source_api = source_api
        self._target_api = target_api
        self._matcher = matcher
        self._migration = migration
        self._logger = logger

    def execute(
        self,
        *,
        source_owner: str,
        source_repo: str,
        target_owner: str,
        target_repo: str,
        ref: str | None = None,
        dry_run: bool = False,
    ) -> RunSummary:
        self._logger.info(
            "code_scanning_alerts_started",
            source=f"{source_owner}/{source_repo}",
            target=f"{target_owner}/{target_repo}",
            ref=ref,
            dry_run=dry_run,
        )

        def update(change: StateUpdate) -> None:
            self._target_api.update_code_scanning_alert(
                target_owner,
                target_repo,
                change.number,
                change.state,
                dismissed_reason=change.reason,
                dismissed_comment=change.comment,
            )

        return self._migration.migrate(
            fetch_source=lambda: self._source_api.get_code_scanning_alerts(source_owner, source_repo, ref),
            fetch_target=lambda: self._target_api.get_code_scanning_alerts(target_owner, target_repo, ref),
            matcher=self._matcher,
            update_fn=update,
            dry_run=dry_run,
        )
