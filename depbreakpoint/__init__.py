"""
depbreakpoint: find the npm version that fixes a transitive dependency.

Given a parent package and a target dependency, depbreakpoint walks the
parent's published versions (oldest stable first) and reports the earliest
one whose resolved dependency tree either no longer contains the target or
only contains it at or above a required minimum version.

Features include:
    • Static npm range resolution against registry metadata
    • Bounded breadth-first traversal with occurrence paths
    • Removal, minimum-version and removal-or-minimum requirement modes
    • Per-search metadata caching with one registry request per package
"""

from __future__ import annotations

from depbreakpoint.__version__ import __version__
from depbreakpoint.core.finder import VersionFinder, find_compatible_version
from depbreakpoint.models.search import SearchParams, SearchResult

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "depbreakpoint Contributors"
__license__ = "Apache-2.0"
__description__ = "Find the earliest npm package version that drops or upgrades a dependency."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
    "SearchParams",
    "SearchResult",
    "VersionFinder",
    "find_compatible_version",
]
