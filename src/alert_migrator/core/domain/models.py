from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class CodeScanningAnalysis:
    """A single code scanning analysis (one uploaded SARIF report).

    Analyses are immutable snapshots. ``created_at`` is only used to replay
    them on the target in the order they were produced on the source.
    """
    id: int
    created_at: datetime
    ref: str
    commit_sha: str
    category: str | None = None
    tool_name: str | None = None


@dataclass(frozen=True)
class SarifUpload:
    """Payload for a SARIF upload to the target repository."""
    sarif: str
    ref: str
    commit_sha: str


@dataclass(frozen=True)
class Location:
    """Where a finding was detected.

    ``blob_sha`` is only populated for secret scanning locations.
    """
    path: str | None
    start_line: int | None = None
    end_line: int | None = None
    start_column: int | None = None
    end_column: int | None = None
    blob_sha: str | None = None


@dataclass(frozen=True)
class Fingerprint:
    """Identity of a finding that is stable across two GitHub instances.

    Alert numbers are assigned per repository and cannot be compared, so two
    alerts are the same finding iff their natural keys are equal and every
    location of one is present among the locations of the other.
    """
    natural_key: tuple[str | None, ...]
    locations: tuple[Location, ...] = ()

    def matches(self, other: Fingerprint) -> bool:
        if self.natural_key != other.natural_key:
            return False
        # Location order is not guaranteed by the API, so cross-match exhaustively
        return all(
            any(loc == candidate for candidate in other.locations)
            for loc in self.locations
        )


@dataclass(frozen=True)
class Alert:
    """A code scanning or secret scanning alert.

    ``resolution_reason`` holds ``dismissed_reason`` for code scanning and
    ``resolution`` for secret scanning alerts.
    """
    number: int
    url: str
    state: str
    fingerprint: Fingerprint
    resolution_reason: str | None = None
    resolution_comment: str | None = None


@dataclass(frozen=True)
class MatchResult:
    source: Alert
    target: Alert | None
    candidates: int = 0

    @property
    def matched(self) -> bool:
        return self.target is not None

    @property
    def ambiguous(self) -> bool:
        return self.candidates > 1


@dataclass(frozen=True)
class StateUpdate:
    """A state change to apply to one target alert."""
    number: int
    state: str
    reason: str | None = None
    comment: str | None = None


class Outcome(enum.Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RunSummary:
    """Aggregate result of one migration run.

    Summaries are immutable; per-item outcomes are folded in with ``record``.
    In dry-run mode ``succeeded`` counts the operations that would have run.
    """
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0
    dry_run: bool = False

    def record(self, outcome: Outcome) -> RunSummary:
        if outcome is Outcome.SUCCEEDED:
            return replace(self, succeeded=self.succeeded + 1)
        if outcome is Outcome.SKIPPED:
            return replace(self, skipped=self.skipped + 1)
        return replace(self, failed=self.failed + 1)

    @property
    def handled(self) -> int:
        return self.succeeded + self.skipped + self.failed

    def __add__(self, other: RunSummary) -> RunSummary:
        return RunSummary(
            succeeded=self.succeeded + other.succeeded,
            skipped=self.skipped + other.skipped,
            failed=self.failed + other.failed,
            total=self.total + other.total,
            dry_run=self.dry_run or other.dry_run,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
            "total": self.total,
            "dry_run": self.dry_run,
        }

