"""
Data model exports for depbreakpoint.

Example:
    >>> from depbreakpoint.models import SearchParams, SearchResult
"""

from __future__ import annotations

from depbreakpoint.models.manifest import PackageManifest, VersionRecord
from depbreakpoint.models.graph import (
    Occurrence,
    SkippedEdge,
    SkipReason,
    TraversalQueueNode,
    TraversalResult,
    VersionCandidate,
)
from depbreakpoint.models.search import SearchParams, SearchResult, Verdict

__all__ = [
    "PackageManifest",
    "VersionRecord",
    "Occurrence",
    "SkippedEdge",
    "SkipReason",
    "TraversalQueueNode",
    "TraversalResult",
    "VersionCandidate",
    "SearchParams",
    "SearchResult",
    "Verdict",
]
