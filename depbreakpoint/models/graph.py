"""
Dependency-graph data models for depbreakpoint.

These types describe one traversal of a parent version's dependency tree:
the candidates being tried, the nodes on the BFS frontier, the places where
the target package was found, and the edges that could not be followed.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Tuple

from depbreakpoint.constants import PATH_SEPARATOR


def format_node(name: str, version: str) -> str:
    """Return the ``name@version`` key used for paths and the visited set."""
    return f"{name}@{version}"


@dataclass(frozen=True)
class VersionCandidate:
    """A concrete parent version to try, tagged stable or pre-release."""

    package: str
    version: str
    prerelease: bool = False

    @property
    def label(self) -> str:
        return "pre-release" if self.prerelease else "stable release"

    def __str__(self) -> str:
        return format_node(self.package, self.version)


@dataclass(frozen=True)
class TraversalQueueNode:
    """A resolved package waiting on the BFS frontier.

    Attributes:
        name: Package name.
        version: Concrete resolved version.
        path: ``name@version`` hops from the root down to this node.
    """

    name: str
    version: str
    path: Tuple[str, ...]

    @property
    def key(self) -> str:
        return format_node(self.name, self.version)

    def child(self, name: str, version: str) -> "TraversalQueueNode":
        """Return the node for a dependency of this node."""
        return TraversalQueueNode(
            name=name,
            version=version,
            path=self.path + (format_node(name, version),),
        )


@dataclass(frozen=True)
class Occurrence:
    """One place in the tree where the target package appears."""

    path_string: str
    version: str

    @classmethod
    def from_node(cls, node: TraversalQueueNode) -> "Occurrence":
        return cls(path_string=PATH_SEPARATOR.join(node.path), version=node.version)

    def __str__(self) -> str:
        return self.path_string


class SkipReason(Enum):
    """Why a dependency edge was not followed."""

    FETCH_ERROR = "fetch-error"  # manifest could not be fetched
    MISSING_VERSION = "missing-version"  # version record absent (unpublished)
    UNRESOLVED_RANGE = "unresolved-range"  # no published version satisfies the range


@dataclass(frozen=True)
class SkippedEdge:
    """A dependency edge the traversal had to skip.

    Attributes:
        source: ``name@version`` of the node being expanded.
        name: Package the edge points at.
        detail: The range, version or error text involved.
        reason: Why the edge was skipped.
    """

    source: str
    name: str
    detail: str
    reason: SkipReason

    def __str__(self) -> str:
        return f"{self.source} -> {self.name} ({self.reason.value}: {self.detail})"


@dataclass
class TraversalResult:
    """Outcome of one bounded BFS over a dependency tree.

    Attributes:
        occurrences: Target occurrences in discovery (BFS) order.
        visited_count: Number of distinct ``name@version`` nodes visited.
        truncated: ``True`` if the node ceiling stopped the search early, in
            which case an empty ``occurrences`` list is not exhaustive.
        skipped_edges: Edges that could not be followed.
    """

    occurrences: List[Occurrence] = field(default_factory=list)
    visited_count: int = 0
    truncated: bool = False
    skipped_edges: List[SkippedEdge] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.occurrences)
