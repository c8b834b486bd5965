"""Synchronisation services."""

from .coordinator import PipelineCoordinator, SyncSummary, SyncWorker
from .synchronizer import ArtifactSynchronizer, ArtifactSyncResult

__all__ = [
    "ArtifactSynchronizer",
    "ArtifactSyncResult",
    "PipelineCoordinator",
    "SyncSummary",
    "SyncWorker",
]
