"""Bounded breadth-first traversal of a package's dependency tree.

Starting from one ``name@version`` root, the traversal resolves every
``dependencies`` / ``optionalDependencies`` edge to a concrete version and
records each path that reaches the target package. Peer dependencies are
never followed: the consumer of a package satisfies them, not the package
itself.

BFS order keeps occurrence paths in shortest-hop discovery order, and a
visited set keyed by ``name@version`` keeps diamonds and cycles from being
expanded twice. A node ceiling bounds the work on very large trees; hitting
it is reported through :attr:`TraversalResult.truncated`.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Deque, List, Set, Union

from depbreakpoint.constants import DEFAULT_MAX_NODES
from depbreakpoint.core.data_store import RegistryDataStore
from depbreakpoint.core.resolver import RangeResolver
from depbreakpoint.exceptions import RegistryError
from depbreakpoint.models.graph import (
    Occurrence,
    SkippedEdge,
    SkipReason,
    TraversalQueueNode,
    TraversalResult,
    format_node,
)
from depbreakpoint.utils.logger import get_logger

logger = get_logger("traversal")

__all__ = ["DependencyTraversal"]

_EdgeOutcome = Union[str, None, RegistryError]


class DependencyTraversal:
    """Walk one parent version's dependency graph looking for a target.

    Args:
        data_store: The search's manifest cache.
        resolver: The search's range resolver.
        max_nodes: Maximum number of distinct nodes processed before the
            traversal stops and reports truncation.
    """

    def __init__(
        self,
        data_store: RegistryDataStore,
        resolver: RangeResolver,
        *,
        max_nodes: int = DEFAULT_MAX_NODES,
    ) -> None:
        if max_nodes < 1:
            raise ValueError("max_nodes must be at least 1")

        self.data_store = data_store
        self.resolver = resolver
        self.max_nodes = max_nodes

    async def traverse(
        self,
        root_name: str,
        root_version: str,
        target_name: str,
    ) -> TraversalResult:
        """Collect every occurrence of *target_name* below ``root@version``.

        Occurrences are leaves: once the target is reached its own
        dependencies are not explored. Unavailable manifests, missing
        version records and unresolvable ranges are recorded as skipped
        edges and never raised.

        Returns:
            A :class:`TraversalResult`; identical inputs against an
            identical registry snapshot always yield the same occurrences
            in the same order.
        """
        result = TraversalResult()
        root = TraversalQueueNode(
            name=root_name,
            version=root_version,
            path=(format_node(root_name, root_version),),
        )
        queue: Deque[TraversalQueueNode] = deque([root])
        visited: Set[str] = set()

        while queue:
            node = queue.popleft()
            if node.key in visited:
                continue

            if len(visited) >= self.max_nodes:
                result.truncated = True
                logger.warning(
                    "Traversal of %s stopped after %d packages (node limit reached)",
                    root.key,
                    self.max_nodes,
                )
                break

            visited.add(node.key)

            if node.name == target_name:
                result.occurrences.append(Occurrence.from_node(node))
                continue

            for child in await self._expand(node, result):
                if child.key not in visited:
                    queue.append(child)

        result.visited_count = len(visited)
        logger.debug(
            "Traversed %s: %d packages, %d occurrence(s) of %s, %d skipped edge(s)",
            root.key,
            result.visited_count,
            len(result.occurrences),
            target_name,
            len(result.skipped_edges),
        )
        return result

    async def _expand(
        self,
        node: TraversalQueueNode,
        result: TraversalResult,
    ) -> List[TraversalQueueNode]:
        """Return the resolved children of *node*, in declaration order."""
        try:
            manifest = await self.data_store.get_manifest(node.name)
        except RegistryError as exc:
            _skip(result, node.key, node.name, str(exc), SkipReason.FETCH_ERROR)
            return []

        record = manifest.get_version(node.version)
        if record is None:
            _skip(result, node.key, node.name, node.version, SkipReason.MISSING_VERSION)
            return []

        edges = list(record.installable_dependencies().items())

        # Siblings resolve concurrently; zip keeps declaration order
        outcomes = await asyncio.gather(
            *(self._resolve_edge(dep_name, dep_range) for dep_name, dep_range in edges)
        )

        children: List[TraversalQueueNode] = []
        for (dep_name, dep_range), outcome in zip(edges, outcomes):
            if isinstance(outcome, RegistryError):
                _skip(result, node.key, dep_name, str(outcome), SkipReason.FETCH_ERROR)
            elif outcome is None:
                _skip(result, node.key, dep_name, dep_range, SkipReason.UNRESOLVED_RANGE)
            else:
                children.append(node.child(dep_name, outcome))

        return children

    async def _resolve_edge(self, name: str, range_expr: str) -> _EdgeOutcome:
        try:
            return await self.resolver.resolve_version(name, range_expr)
        except RegistryError as exc:
            return exc


def _skip(
    result: TraversalResult,
    source: str,
    name: str,
    detail: str,
    reason: SkipReason,
) -> None:
    edge = SkippedEdge(source=source, name=name, detail=detail, reason=reason)
    result.skipped_edges.append(edge)
    logger.debug("Skipping edge %s", edge)
