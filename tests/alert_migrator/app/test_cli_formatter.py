from alert_migrator.app.cli_formatter import format_repository_list, format_run_summary, format_summaries
from alert_migrator.core.domain.models import RunSummary


def test_format_run_summary():
    text = format_run_summary("analyses", RunSummary(succeeded=2, skipped=1, failed=3, total=6))

    assert "Code Scanning Analyses" in text
    assert "Succeeded:     2" in text
    assert "Skipped:       1" in text
    assert "Failed:        3" in text
    assert "Overall:       6" in text


def test_format_run_summary_dry_run():
    text = format_run_summary("secret_scanning_alerts", RunSummary(succeeded=4, total=4, dry_run=True))

    assert "Secret Scanning Alerts (dry run)" in text
    assert "Would migrate: 4" in text


def test_format_summaries_empty():
    assert format_summaries({}) == "Nothing was migrated."


def test_format_repository_list():
    text = format_repository_list("acme", ["a", "b"])

    assert text.splitlines() == ["Found 2 repositories in acme:", "", "  a", "  b"]
