from __future__ import annotations

from dependency_injector import containers, providers

from ..core.services import (
    CODE_SCANNING_MIGRATABLE_STATES,
    SECRET_SCANNING_MIGRATABLE_STATES,
    AlertMigrationService,
    ArtifactReplicator,
    FindingMatcher,
)
from ..core.usecases.list_repos import ListRepositoriesUseCase
from ..core.usecases.migrate_analyses import MigrateAnalysesUseCase
from ..core.usecases.migrate_code_scanning_alerts import MigrateCodeScanningAlertsUseCase
from ..core.usecases.migrate_secret_alerts import MigrateSecretScanningAlertsUseCase
from ..infra.github_api import GithubApi
from ..infra.github_client import GithubClient
from ..infra.logging import MigrationLogger


def _first_set(*values: str | None) -> str | None:
    return next((v for v in values if v), None)


def _negate(value: bool) -> bool:
    return not value


class Container(containers.DeclarativeContainer):
    """DI container fed from AppConfig via ``config.from_pydantic``."""

    config = providers.Configuration()

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        MigrationLogger,
        run_name=config.runtime.run_name,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # GitHub adapters; the source token falls back to the target token
    source_client = providers.Singleton(
        GithubClient,
        api_url=config.github.source_api_url,
        token=providers.Callable(_first_set, config.github.source_token, config.github.target_token),
        logger=logger,
        verify_ssl=providers.Callable(_negate, config.github.no_ssl_verify),
        timeout=config.github.timeout,
    )

    target_client = providers.Singleton(
        GithubClient,
        api_url=config.github.target_api_url,
        token=config.github.target_token,
        logger=logger,
        timeout=config.github.timeout,
    )

    source_api = providers.Singleton(
        GithubApi,
        client=source_client,
        per_page=config.github.per_page,
    )

    target_api = providers.Singleton(
        GithubApi,
        client=target_client,
        per_page=config.github.per_page,
    )

    # Domain services
    replicator = providers.Factory(
        ArtifactReplicator,
        logger=logger,
    )

    alert_migration = providers.Factory(
        AlertMigrationService,
        logger=logger,
        max_workers=config.migration.max_workers,
    )

    code_scanning_matcher = providers.Factory(
        FindingMatcher,
        logger=logger,
        migratable_states=CODE_SCANNING_MIGRATABLE_STATES,
    )

    secret_scanning_matcher = providers.Factory(
        FindingMatcher,
        logger=logger,
        migratable_states=SECRET_SCANNING_MIGRATABLE_STATES,
    )

    # Use cases
    migrate_analyses_uc = providers.Factory(
        MigrateAnalysesUseCase,
        source_api=source_api,
        target_api=target_api,
        replicator=replicator,
        logger=logger,
    )

    migrate_code_scanning_alerts_uc = providers.Factory(
        MigrateCodeScanningAlertsUseCase,
        source_api=source_api,
        target_api=target_api,
        matcher=code_scanning_matcher,
        migration=alert_migration,
        logger=logger,
    )

    migrate_secret_alerts_uc = providers.Factory(
        MigrateSecretScanningAlertsUseCase,
        source_api=source_api,
        target_api=target_api,
        matcher=secret_scanning_matcher,
        migration=alert_migration,
        logger=logger,
    )

    list_repos_uc = providers.Factory(
        ListRepositoriesUseCase,
        api=source_api,
    )
