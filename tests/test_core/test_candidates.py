"""Unit tests for depbreakpoint.core.candidates."""

from __future__ import annotations

from typing import List

import pytest

from depbreakpoint.core.candidates import order_candidates
from depbreakpoint.exceptions import ValidationError


def _versions(candidates) -> List[str]:
    return [c.version for c in candidates]


@pytest.mark.unit
class TestOrderCandidates:
    """Tests for candidate filtering and trial order."""

    def test_floor_with_prerelease_of_floor(self) -> None:
        candidates = order_candidates(
            "pkg", ["1.0.0", "1.0.0-beta.1", "0.9.0", "2.0.0"], "1.0.0"
        )

        assert _versions(candidates) == ["1.0.0", "2.0.0", "1.0.0-beta.1"]
        assert [c.prerelease for c in candidates] == [False, False, True]

    def test_stable_before_prerelease_each_ascending(self) -> None:
        versions = ["3.0.0-rc.1", "2.0.0", "1.10.0", "1.2.0", "3.0.0-alpha.2", "1.9.0"]

        assert _versions(order_candidates("pkg", versions)) == [
            "1.2.0",
            "1.9.0",
            "1.10.0",
            "2.0.0",
            "3.0.0-alpha.2",
            "3.0.0-rc.1",
        ]

    def test_semver_ordering_not_lexicographic(self) -> None:
        assert _versions(order_candidates("pkg", ["10.0.0", "9.0.0", "2.0.0"])) == [
            "2.0.0",
            "9.0.0",
            "10.0.0",
        ]

    def test_prerelease_identifier_precedence(self) -> None:
        versions = ["1.0.0-rc.1", "1.0.0-beta.11", "1.0.0-beta.2", "1.0.0-alpha"]

        assert _versions(order_candidates("pkg", versions)) == [
            "1.0.0-alpha",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
        ]

    @pytest.mark.parametrize(
        "floor, expected",
        [
            ("2", ["2.0.0", "2.5.1", "3.0.0"]),
            ("2.5", ["2.5.1", "3.0.0"]),
            ("v3.0.0", ["3.0.0"]),
        ],
        ids=["major-only", "major-minor", "leading-v"],
    )
    def test_partial_floor_is_padded(self, floor: str, expected: List[str]) -> None:
        versions = ["1.0.0", "2.0.0", "2.5.1", "3.0.0"]
        assert _versions(order_candidates("pkg", versions, floor)) == expected

    def test_prerelease_floor_uses_full_precedence(self) -> None:
        versions = ["1.0.0-alpha.1", "1.0.0-beta.1", "1.0.0-beta.3", "1.0.0"]

        assert _versions(order_candidates("pkg", versions, "1.0.0-beta.2")) == [
            "1.0.0",
            "1.0.0-beta.3",
        ]

    @pytest.mark.parametrize("floor", [None, ""])
    def test_absent_floor_keeps_everything(self, floor) -> None:
        assert len(order_candidates("pkg", ["0.0.1", "1.0.0"], floor)) == 2

    def test_non_semver_versions_dropped(self) -> None:
        versions = ["1.0.0", "latest", "1.0", "2.0.0.1"]
        # "1.0" is published verbatim by some old packages and pads to 1.0.0
        assert _versions(order_candidates("pkg", versions)) == ["1.0", "1.0.0"]

    def test_nothing_above_floor(self) -> None:
        assert order_candidates("pkg", ["1.0.0", "1.1.0"], "5.0.0") == []

    def test_invalid_floor_raises(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            order_candidates("pkg", ["1.0.0"], "not-a-version")

        assert exc_info.value.field == "floor"

    def test_candidates_carry_package(self) -> None:
        (candidate,) = order_candidates("left-pad", ["1.3.0"])

        assert candidate.package == "left-pad"
        assert str(candidate) == "left-pad@1.3.0"
        assert candidate.label == "stable release"
