"""Tests for dependency wiring."""
from alert_migrator.app.config import AppConfig, DirectoryConfig, GitHubConfig, MigrationConfig
from alert_migrator.app.container import Container
from alert_migrator.core.usecases.migrate_secret_alerts import MigrateSecretScanningAlertsUseCase
from alert_migrator.infra.github_api import GithubApi


def _container(tmp_path, **github):
    config = AppConfig(
        directories=DirectoryConfig(home=tmp_path),
        github=GitHubConfig(**github),
        migration=MigrationConfig(max_workers=2),
    )
    container = Container()
    container.config.from_pydantic(config)
    return container


def test_source_client_falls_back_to_target_token(tmp_path):
    container = _container(tmp_path, target_token="target-token")
    try:
        client = container.source_client()
        assert client.session.headers["Authorization"] == "Bearer target-token"
        assert client.session.verify is True
    finally:
        container.shutdown_resources()


def test_source_and_target_clients_are_configured_separately(tmp_path):
    container = _container(
        tmp_path,
        source_token="source-token",
        target_token="target-token",
        source_api_url="https://ghes.example.com/api/v3",
        no_ssl_verify=True,
    )
    try:
        source = container.source_client()
        target = container.target_client()

        assert source.api_url == "https://ghes.example.com/api/v3"
        assert source.session.headers["Authorization"] == "Bearer source-token"
        assert source.session.verify is False
        assert target.api_url == "https://api.github.com"
        assert target.session.headers["Authorization"] == "Bearer target-token"
        # TLS verification is only relaxed towards the source
        assert target.session.verify is True
    finally:
        container.shutdown_resources()


def test_use_cases_are_wired(tmp_path):
    container = _container(tmp_path, target_token="t")
    try:
        uc = container.migrate_secret_alerts_uc()

        assert isinstance(uc, MigrateSecretScanningAlertsUseCase)
        assert isinstance(container.source_api(), GithubApi)
        assert container.source_api() is container.source_api()
        assert container.alert_migration()._max_workers == 2
    finally:
        container.shutdown_resources()
