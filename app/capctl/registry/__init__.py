"""Registry clients for looking up published package versions.

This module exports the registry interface and its implementations.
"""

from capctl.registry.base import (
    PackageNotFoundError,
    Registry,
    RegistryEntry,
    RegistryError,
    index_path,
    select_latest_version,
)
from capctl.registry.cache import CachedIndexRegistry
from capctl.registry.crates_io import CrateInfo, CratesIoRegistry

__all__ = [
    "CachedIndexRegistry",
    "CrateInfo",
    "CratesIoRegistry",
    "PackageNotFoundError",
    "Registry",
    "RegistryEntry",
    "RegistryError",
    "index_path",
    "select_latest_version",
]
