"""Unit tests for depbreakpoint.models.graph."""

from __future__ import annotations

import pytest

from depbreakpoint.models.graph import (
    Occurrence,
    SkippedEdge,
    SkipReason,
    TraversalQueueNode,
    TraversalResult,
    VersionCandidate,
    format_node,
)


@pytest.mark.unit
class TestGraphModels:
    """Tests for the traversal data types."""

    def test_format_node_scoped(self) -> None:
        assert format_node("@babel/core", "7.0.0") == "@babel/core@7.0.0"

    def test_candidate_labels(self) -> None:
        assert VersionCandidate("p", "1.0.0").label == "stable release"
        assert VersionCandidate("p", "1.0.0-rc.1", prerelease=True).label == "pre-release"

    def test_child_extends_path(self) -> None:
        root = TraversalQueueNode("a", "1.0.0", ("a@1.0.0",))

        child = root.child("b", "2.0.0").child("c", "3.0.0")

        assert child.key == "c@3.0.0"
        assert child.path == ("a@1.0.0", "b@2.0.0", "c@3.0.0")
        assert root.path == ("a@1.0.0",)

    def test_occurrence_from_node(self) -> None:
        node = TraversalQueueNode("t", "1.2.3", ("a@1.0.0", "t@1.2.3"))

        occurrence = Occurrence.from_node(node)

        assert occurrence.path_string == "a@1.0.0 > t@1.2.3"
        assert occurrence.version == "1.2.3"
        assert str(occurrence) == occurrence.path_string

    def test_skipped_edge_str(self) -> None:
        edge = SkippedEdge("a@1.0.0", "b", "^9.0.0", SkipReason.UNRESOLVED_RANGE)

        assert str(edge) == "a@1.0.0 -> b (unresolved-range: ^9.0.0)"

    def test_traversal_result_defaults(self) -> None:
        result = TraversalResult()

        assert not result.found
        assert not result.truncated
        assert result.visited_count == 0
        assert result.skipped_edges == []
