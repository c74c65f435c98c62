"""
Persistence adapters for task and snapshot records.
"""

from uplift.infrastructure.persistence.filesystem import FilesystemStorage
from uplift.infrastructure.persistence.memory import InMemoryStorage

__all__ = [
    "InMemoryStorage",
    "FilesystemStorage",
]
