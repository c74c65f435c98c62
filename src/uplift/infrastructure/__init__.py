"""
Infrastructure layer for the upgrade engine.

Contains adapters for external concerns (storage, snapshots, package
metadata, knowledge base, handler registry, subprocesses).
"""

from uplift.infrastructure.knowledge_base import KnowledgeBase
from uplift.infrastructure.npm import NpmMetadataProvider, StaticMetadataProvider
from uplift.infrastructure.persistence import FilesystemStorage, InMemoryStorage
from uplift.infrastructure.process import SubprocessRunner
from uplift.infrastructure.registry import HandlerRegistry
from uplift.infrastructure.snapshot import (
    GitSnapshotProvider,
    InMemorySnapshotProvider,
)

__all__ = [
    # Persistence
    "InMemoryStorage",
    "FilesystemStorage",
    # Snapshots
    "GitSnapshotProvider",
    "InMemorySnapshotProvider",
    # Package metadata
    "NpmMetadataProvider",
    "StaticMetadataProvider",
    # Knowledge base
    "KnowledgeBase",
    # Registry
    "HandlerRegistry",
    # Commands
    "SubprocessRunner",
]
