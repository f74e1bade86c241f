from __future__ import annotations

from typing import Iterable, Sequence

from ..domain.models import Alert, MatchResult
from ..ports import LoggerPort


CODE_SCANNING_MIGRATABLE_STATES = frozenset({"open", "dismissed"})
SECRET_SCANNING_MIGRATABLE_STATES = frozenset({"open", "resolved"})


def find_candidates(source: Alert, targets: Sequence[Alert]) -> list[Alert]:
    """Return every target alert whose fingerprint matches, in target order."""
    return [t for t in targets if source.fingerprint.matches(t.fingerprint)]


class FindingMatcher:
    """Pairs source alerts with the corresponding target alerts.

    Only sources in ``migratable_states`` are considered. When several target
    alerts share a fingerprint the first in fetch order wins and the ambiguity
    is logged, since there is no way to tell which one is correct.
    """

    def __init__(self, *, logger: LoggerPort, migratable_states: Iterable[str]) -> None:
        self._logger = logger
        self._migratable_states = frozenset(migratable_states)

    def is_migratable(self, alert: Alert) -> bool:
        return alert.state in self._migratable_states

    def match(self, sources: Iterable[Alert], targets: Sequence[Alert]) -> list[MatchResult]:
        """Match each migratable source alert against the target alerts.

        Non-migratable sources are left out of the result. Unmatched sources
        are returned with ``target=None``.
        """
        results: list[MatchResult] = []
        for source in sources:
            if not self.is_migratable(source):
                self._logger.debug(
                    "alert_not_migratable",
                    alert_number=source.number,
                    alert_url=source.url,
                    state=source.state,
                )
                continue

            candidates = find_candidates(source, targets)
            if not candidates:
                self._logger.warning("alert_unmatched", alert_number=source.number, alert_url=source.url)
                results.append(MatchResult(source=source, target=None))
                continue

            if len(candidates) > 1:
                self._logger.warning(
                    "ambiguous_match",
                    alert_number=source.number,
                    alert_url=source.url,
                    candidates=[c.number for c in candidates],
                )

            results.append(MatchResult(source=source, target=candidates[0], candidates=len(candidates)))
        return results
