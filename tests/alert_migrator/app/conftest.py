"""Shared fixtures for app-level tests."""
import pytest
from dependency_injector import providers

from alert_migrator.app.config import AppConfig, DirectoryConfig, GitHubConfig
from alert_migrator.app.container import Container

from fakes import FakeGithubApi, analysis, code_alert, secret_alert, secret_location


@pytest.fixture
def test_config(tmp_path):
    return AppConfig(
        directories=DirectoryConfig(home=tmp_path / "home"),
        github=GitHubConfig(target_token="target-token"),
    )


@pytest.fixture
def source_api():
    loc = secret_location("creds.env", 4, "blob-1")
    return FakeGithubApi(
        default_branch="main",
        analyses=[
            analysis(2, "2022-03-02T00:00:00", commit_sha="sha2"),
            analysis(1, "2022-03-01T00:00:00", commit_sha="sha1"),
        ],
        code_scanning_alerts=[
            code_alert(1, "py/sql-injection", state="dismissed", reason="false positive"),
            code_alert(2, "py/xss", state="fixed"),
        ],
        secret_alerts=[secret_alert(1, "ghp_abc", [loc], state="resolved", resolution="revoked")],
        repositories=["alpha", "beta", "gamma"],
    )


@pytest.fixture
def target_api():
    loc = secret_location("creds.env", 4, "blob-1")
    return FakeGithubApi(
        code_scanning_alerts=[code_alert(11, "py/sql-injection"), code_alert(12, "py/xss")],
        secret_alerts=[secret_alert(21, "ghp_abc", [loc])],
    )


@pytest.fixture
def fake_container(source_api, target_api, monkeypatch):
    """Replace Container in cli and main with one whose GitHub APIs are fakes."""

    def create_mock_container():
        c = Container()
        c.source_api.override(providers.Object(source_api))
        c.target_api.override(providers.Object(target_api))
        return c

    monkeypatch.setattr("alert_migrator.app.cli.Container", create_mock_container)
    monkeypatch.setattr("alert_migrator.app.main.Container", create_mock_container)
    return source_api, target_api
