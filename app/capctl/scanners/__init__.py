"""Discovery strategies for cargo-installed packages.

This module exports the scanner classes for finding installed packages.
"""

from capctl.scanners.base import DiscoveryError, Scanner
from capctl.scanners.binary import BinaryInvocationScanner
from capctl.scanners.manifest import CratesManifestScanner

__all__ = ["BinaryInvocationScanner", "CratesManifestScanner", "DiscoveryError", "Scanner"]
