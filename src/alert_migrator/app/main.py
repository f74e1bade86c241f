from __future__ import annotations

from .config import AppConfig
from .container import Container
from ..core.domain.models import RunSummary


def _create_container(config: AppConfig | None = None, *, source_only: bool = False) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.
        source_only: The operation reads the source instance only, so a
            source token is enough

    Returns:
        Initialized container instance

    Raises:
        ValueError: If the token the operation needs is not configured
    """
    if config is None:
        # Load from environment variables (BaseSettings default behavior)
        config = AppConfig()

    if source_only:
        if not config.github.effective_source_token:
            raise ValueError(
                "GitHub token required via ALERT_MIGRATOR_GITHUB__SOURCE_TOKEN "
                "or ALERT_MIGRATOR_GITHUB__TARGET_TOKEN"
            )
    elif not config.github.target_token:
        raise ValueError("GitHub token required via ALERT_MIGRATOR_GITHUB__TARGET_TOKEN")

    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()

    return container


def get_default_branch(owner: str, repo: str, *, config: AppConfig | None = None) -> str:
    """Return the default branch of a source repository."""
    container = _create_container(config, source_only=True)
    try:
        return container.source_api().get_default_branch(owner, repo)
    finally:
        container.shutdown_resources()


def migrate_analyses(
    source_owner: str,
    source_repo: str,
    target_owner: str,
    target_repo: str | None = None,
    *,
    ref: str | None = None,
    dry_run: bool = False,
    config: AppConfig | None = None,
) -> RunSummary:
    """Copy code scanning analyses (SARIF reports) from source to target.

    Args:
        source_owner: Source organization or user
        source_repo: Source repository name
        target_owner: Target organization or user
        target_repo: Target repository name (defaults to source_repo)
        ref: Only migrate analyses of this ref (None = all refs)
        dry_run: Only report what would be migrated
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        Run summary

    Raises:
        GithubApiError: On a fatal API failure (``partial_summary`` is set when
            the failure happened during uploads)
    """
    container = _create_container(config)
    try:
        uc = container.migrate_analyses_uc()
        return uc.execute(
            source_owner=source_owner,
            source_repo=source_repo,
            target_owner=target_owner,
            target_repo=target_repo or source_repo,
            ref=ref,
            dry_run=dry_run,
        )
    finally:
        container.shutdown_resources()


def migrate_code_scanning_alerts(
    source_owner: str,
    source_repo: str,
    target_owner: str,
    target_repo: str | None = None,
    *,
    ref: str | None = None,
    dry_run: bool = False,
    config: AppConfig | None = None,
) -> RunSummary:
    """Align target code scanning alert states with the source."""
    container = _create_container(config)
    try:
        uc = container.migrate_code_scanning_alerts_uc()
        return uc.execute(
            source_owner=source_owner,
            source_repo=source_repo,
            target_owner=target_owner,
            target_repo=target_repo or source_repo,
            ref=ref,
            dry_run=dry_run,
        )
    finally:
        container.shutdown_resources()


def migrate_secret_scanning_alerts(
    source_owner: str,
    source_repo: str,
    target_owner: str,
    target_repo: str | None = None,
    *,
    dry_run: bool = False,
    config: AppConfig | None = None,
) -> RunSummary:
    """Align target secret scanning alert resolutions with the source."""
    container = _create_container(config)
    try:
        uc = container.migrate_secret_alerts_uc()
        return uc.execute(
            source_owner=source_owner,
            source_repo=source_repo,
            target_owner=target_owner,
            target_repo=target_repo or source_repo,
            dry_run=dry_run,
        )
    finally:
        container.shutdown_resources()


def list_repositories(
    org: str,
    *,
    limit: int | None = None,
    config: AppConfig | None = None,
) -> list[str]:
    """List repository names of a source organization."""
    container = _create_container(config, source_only=True)
    try:
        return container.list_repos_uc().execute(org=org, limit=limit)
    finally:
        container.shutdown_resources()
