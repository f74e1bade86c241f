import os
from pathlib import Path
import pytest
from helpers import mark_by_dir


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    # Keep tokens from the developer's shell out of tests and logs out of the real cache dir
    for key in list(os.environ):
        if key.startswith("ALERT_MIGRATOR_") or key in ("GH_PAT", "GH_SOURCE_PAT"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ALERT_MIGRATOR_DIRECTORIES__HOME", str(tmp_path / "home"))
    yield


TESTS = Path(__file__).parent

def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "alert_migrator" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "alert_migrator" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "alert_migrator" / "app", pytest.mark.e2e)
