"""
Package metadata adapters.
"""

from uplift.infrastructure.npm.registry import NpmMetadataProvider
from uplift.infrastructure.npm.static import StaticMetadataProvider

__all__ = [
    "NpmMetadataProvider",
    "StaticMetadataProvider",
]
