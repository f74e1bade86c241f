from __future__ import annotations

from ..domain.models import RunSummary, StateUpdate
from ..ports import GithubApiPort, LoggerPort
from ..services import AlertMigrationService, FindingMatcher


class MigrateSecretScanningAlertsUseCase:
    """Use case for aligning secret scanning alert resolutions."""

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
        dry_run: bool = False,
    ) -> RunSummary:
        self._logger.info(
            "secret_alerts_started",
            source=f"{source_owner}/{source_repo}",
            target=f"{target_owner}/{target_repo}",
            dry_run=dry_run,
        )

        def update(change: StateUpdate) -> None:
            self._target_api.update_secret_scanning_alert(
                target_owner,
                target_repo,
                change.number,
                change.state,
                resolution=change.reason,
                resolution_comment=change.comment,
            )

        return self._migration.migrate(
            fetch_source=lambda: self._source_api.get_secret_scanning_alerts(source_owner, source_repo),
            fetch_target=lambda: self._target_api.get_secret_scanning_alerts(target_owner, target_repo),
            matcher=self._matcher,
            update_fn=update,
            dry_run=dry_run,
        )
