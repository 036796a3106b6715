"""
Search input/output models for depbreakpoint.

:class:`SearchParams` is the single inbound shape of the search engine and
:class:`SearchResult` the single outbound one. Both convert to and from the
camelCase JSON shape used by external callers (HTTP bodies, scripts).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from depbreakpoint.exceptions import ValidationError
from depbreakpoint.utils.version_utils import parse_version


def split_spec(spec: str) -> Tuple[str, str]:
    """Split a ``name@version`` spec into its parts.

    The split happens on the *last* ``@`` so scoped packages work; a spec
    without a version yields an empty version string.

    Examples:
        >>> split_spec("axios@1")
        ('axios', '1')
        >>> split_spec("@babel/core@7.2")
        ('@babel/core', '7.2')
        >>> split_spec("@babel/core")
        ('@babel/core', '')
    """
    spec = spec.strip()
    at = spec.rfind("@")
    if at <= 0:
        return spec, ""
    return spec[:at], spec[at + 1 :]


@dataclass
class SearchParams:
    """Input for one search.

    Attributes:
        parent_package: Package whose versions are searched.
        parent_min_version: Lowest parent version to consider (may be empty).
        child_package: Target dependency looked up in each tree.
        child_min_version: Minimum acceptable target version (may be empty
            only when ``package_removed`` is set).
        package_removed: Accept trees where the target is absent.
    """

    parent_package: str
    child_package: str
    parent_min_version: str = ""
    child_min_version: str = ""
    package_removed: bool = False

    def __post_init__(self) -> None:
        self.parent_package = (self.parent_package or "").strip()
        self.child_package = (self.child_package or "").strip()
        self.parent_min_version = (self.parent_min_version or "").strip()
        self.child_min_version = (self.child_min_version or "").strip()
        self.package_removed = bool(self.package_removed)

    def validate(self) -> None:
        """Check the parameters before any registry access.

        Raises:
            ValidationError: A package name is missing, neither removal nor
                a child minimum version was requested, or a version is not a
                valid (partial) semantic version.
        """
        if not self.parent_package or not self.child_package:
            raise ValidationError(
                "Parent package and child package are required",
                field="parentPackage" if not self.parent_package else "childPackage",
            )

        if not self.package_removed and not self.child_min_version:
            raise ValidationError(
                "Child minimum version is required when package is not marked as removed",
                field="childMinVersion",
            )

        for field_name, value in (
            ("parentMinVersion", self.parent_min_version),
            ("childMinVersion", self.child_min_version),
        ):
            if value and parse_version(value) is None:
                raise ValidationError(
                    f"Invalid version '{value}'",
                    field=field_name,
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchParams":
        """Build parameters from the camelCase wire shape."""
        return cls(
            parent_package=str(data.get("parentPackage") or ""),
            parent_min_version=str(data.get("parentMinVersion") or ""),
            child_package=str(data.get("childPackage") or ""),
            child_min_version=str(data.get("childMinVersion") or ""),
            package_removed=bool(data.get("packageRemoved", False)),
        )

    @classmethod
    def from_specs(
        cls,
        parent_spec: str,
        child_spec: str,
        *,
        package_removed: bool = False,
    ) -> "SearchParams":
        """Build parameters from ``name[@min]`` command-line style specs."""
        parent, parent_min = split_spec(parent_spec)
        child, child_min = split_spec(child_spec)
        return cls(
            parent_package=parent,
            parent_min_version=parent_min,
            child_package=child,
            child_min_version=child_min,
            package_removed=package_removed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parentPackage": self.parent_package,
            "parentMinVersion": self.parent_min_version,
            "childPackage": self.child_package,
            "childMinVersion": self.child_min_version,
            "packageRemoved": self.package_removed,
        }


@dataclass(frozen=True)
class Verdict:
    """Evaluator output for one parent version's occurrences."""

    success: bool
    message: str
    details: Tuple[str, ...] = ()


@dataclass
class SearchResult:
    """Outcome of a search.

    Attributes:
        success: Whether a satisfying parent version was found.
        version: The earliest satisfying parent version (only on success).
        message: Human-readable summary.
        details: Evidence lines (occurrence paths).
        truncated: At least one traversal hit the node ceiling.
        candidates_evaluated: Parent versions traversed before stopping.
        skipped_edges: Dependency edges skipped across all traversals.
    """

    success: bool
    message: str
    version: Optional[str] = None
    details: List[str] = field(default_factory=list)
    truncated: bool = False
    candidates_evaluated: int = 0
    skipped_edges: int = 0

    @classmethod
    def failure(cls, message: str, **kwargs: Any) -> "SearchResult":
        return cls(success=False, message=message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire shape ``{success, version?, message, details}``."""
        data: Dict[str, Any] = {"success": self.success}
        if self.success and self.version is not None:
            data["version"] = self.version
        data["message"] = self.message
        data["details"] = list(self.details)
        return data
