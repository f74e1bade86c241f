"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from ..core.domain.models import RunSummary


STEP_TITLES = {
    "analyses": "Code Scanning Analyses",
    "code_scanning_alerts": "Code Scanning Alerts",
    "secret_scanning_alerts": "Secret Scanning Alerts",
}


def format_run_summary(step: str, summary: RunSummary) -> str:
    """Format one run summary.

    Args:
        step: Migration step key (see STEP_TITLES)
        summary: Summary to display

    Returns:
        Formatted string for display
    """
    title = STEP_TITLES.get(step, step)
    if summary.dry_run:
        title += " (dry run)"
        succeeded_label = "Would migrate"
    else:
        succeeded_label = "Succeeded"

    lines = []
    lines.append("-" * 60)
    lines.append(title)
    lines.append("-" * 60)
    lines.append(f"{succeeded_label + ':':<15}{summary.succeeded}")
    lines.append(f"{'Skipped:':<15}{summary.skipped}")
    lines.append(f"{'Failed:':<15}{summary.failed}")
    lines.append(f"{'Overall:':<15}{summary.total}")
    return "\n".join(lines)


def format_summaries(summaries: dict[str, RunSummary]) -> str:
    if not summaries:
        return "Nothing was migrated."
    return "\n\n".join(format_run_summary(step, s) for step, s in summaries.items())


def format_repository_list(org: str, names: list[str]) -> str:
    lines = [f"Found {len(names)} repositories in {org}:", ""]
    for name in names:
        lines.append(f"  {name}")
    return "\n".join(lines)
