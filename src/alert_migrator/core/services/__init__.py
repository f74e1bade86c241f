from __future__ import annotations

from .replicator import ArtifactReplicator, order_for_replay
from .matcher import (
    CODE_SCANNING_MIGRATABLE_STATES,
    SECRET_SCANNING_MIGRATABLE_STATES,
    FindingMatcher,
)
from .synchronizer import StateSynchronizer, plan_update
from .alert_migration import AlertMigrationService, fetch_concurrently

__all__ = [
    "ArtifactReplicator",
    "order_for_replay",
    "CODE_SCANNING_MIGRATABLE_STATES",
    "SECRET_SCANNING_MIGRATABLE_STATES",
    "FindingMatcher",
    "StateSynchronizer",
    "plan_update",
    "AlertMigrationService",
    "fetch_concurrently",
]
