"""
Snapshot adapters.
"""

from uplift.infrastructure.snapshot.git import GitSnapshotProvider
from uplift.infrastructure.snapshot.memory import InMemorySnapshotProvider

__all__ = [
    "GitSnapshotProvider",
    "InMemorySnapshotProvider",
]
