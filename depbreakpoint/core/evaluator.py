"""Compatibility evaluation for one parent version's dependency tree.

Three requirement modes are supported, selected from the search input:

========================  ===============  ===========================================
mode                      package_removed  succeeds when
========================  ===============  ===========================================
min-version               ``False``        target present and every instance >= min
removed                   ``True``         target absent
removed-or-min-version    ``True`` + min   target absent OR every instance >= min
========================  ===============  ===========================================

Versions are compared with semver precedence after padding partial versions
(``"4"`` -> ``"4.0.0"``).
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from depbreakpoint.exceptions import ValidationError
from depbreakpoint.models.graph import Occurrence
from depbreakpoint.models.search import Verdict
from depbreakpoint.utils.version_utils import meets_minimum, parse_version

__all__ = ["CompatibilityEvaluator", "RequirementMode"]


class RequirementMode(Enum):
    """How a parent version's tree is judged."""

    MIN_VERSION = "min-version"
    REMOVED = "removed"
    REMOVED_OR_MIN_VERSION = "removed-or-min-version"

    @classmethod
    def select(
        cls,
        child_min_version: Optional[str],
        package_removed: bool,
    ) -> "RequirementMode":
        """Pick the mode for a ``(package_removed, child_min_version)`` pair.

        Raises:
            ValidationError: Neither removal nor a minimum version was asked
                for.
        """
        if not package_removed:
            if not child_min_version:
                raise ValidationError(
                    "Child minimum version is required when package is not marked as removed",
                    field="childMinVersion",
                )
            return cls.MIN_VERSION
        if child_min_version:
            return cls.REMOVED_OR_MIN_VERSION
        return cls.REMOVED


class CompatibilityEvaluator:
    """Turn traversal occurrences into a pass/fail :class:`Verdict`.

    Args:
        child_package: Name of the target package, used in messages.
    """

    def __init__(self, child_package: str) -> None:
        self.child_package = child_package

    def evaluate(
        self,
        occurrences: Sequence[Occurrence],
        child_min_version: Optional[str],
        package_removed: bool,
    ) -> Verdict:
        """Judge one tree's occurrences of the target package.

        Args:
            occurrences: Target occurrences from the traversal.
            child_min_version: Minimum acceptable version (may be empty in
                removed mode).
            package_removed: Whether absence of the target is acceptable.

        Returns:
            A :class:`Verdict`. Failure details list the offending
            occurrence paths.

        Raises:
            ValidationError: The mode cannot be determined, or the minimum
                version is not a valid (partial) semantic version.
        """
        mode = RequirementMode.select(child_min_version, package_removed)
        child = self.child_package

        if mode is RequirementMode.REMOVED:
            if not occurrences:
                return self._absent()
            return Verdict(
                success=False,
                message=(
                    f"Package '{child}' still exists in dependency tree "
                    "(package removal condition not satisfied)"
                ),
                details=_paths(occurrences),
            )

        assert child_min_version
        if parse_version(child_min_version) is None:
            raise ValidationError(
                f"Invalid version '{child_min_version}'",
                field="childMinVersion",
            )

        if not occurrences:
            if mode is RequirementMode.REMOVED_OR_MIN_VERSION:
                return self._absent()
            return Verdict(
                success=False,
                message=f"Package '{child}' not found in dependency tree",
            )

        outdated = _below_minimum(occurrences, child_min_version)

        if mode is RequirementMode.REMOVED_OR_MIN_VERSION:
            if not outdated:
                return Verdict(
                    success=True,
                    message=(
                        f"All instances of '{child}' meet the minimum version "
                        f"requirement (>= {child_min_version}) - minimum version "
                        "condition satisfied"
                    ),
                    details=_paths(occurrences),
                )
            return Verdict(
                success=False,
                message=(
                    f"Package '{child}' exists but doesn't meet minimum version "
                    f"requirement. Need EITHER package removal OR version >= "
                    f"{child_min_version}"
                ),
                details=_paths(outdated),
            )

        if not outdated:
            return Verdict(
                success=True,
                message=(
                    f"All instances of '{child}' meet the minimum version "
                    f"requirement (>= {child_min_version})"
                ),
                details=_paths(occurrences),
            )
        return Verdict(
            success=False,
            message=(
                f"Some instances of '{child}' are older than required "
                f"(>= {child_min_version})"
            ),
            details=_paths(outdated),
        )

    def _absent(self) -> Verdict:
        return Verdict(
            success=True,
            message=(
                f"Package '{self.child_package}' does not appear anywhere in the "
                "dependency tree (package removed condition satisfied)"
            ),
        )


def _below_minimum(
    occurrences: Sequence[Occurrence],
    minimum: str,
) -> List[Occurrence]:
    """Return the occurrences whose version is below *minimum*."""
    return [occ for occ in occurrences if not meets_minimum(occ.version, minimum)]


def _paths(occurrences: Sequence[Occurrence]) -> Tuple[str, ...]:
    return tuple(occ.path_string for occ in occurrences)
