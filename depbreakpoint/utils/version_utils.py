"""
Semantic-version helpers for depbreakpoint.

npm versions and ranges follow node-semver rather than PEP 440, so all
parsing goes through :mod:`semantic_version` (``Version`` for concrete
versions, ``NpmSpec`` for ranges such as ``^2.0.0`` or ``>=1 <3 || 4.x``).

User-supplied thresholds are often partial (``"4"``, ``"4.1"``); they are
right-padded to three components by :func:`normalize_version` before any
comparison.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from semantic_version import NpmSpec, Version
from semantic_version.base import AllOf, AnyOf, Range

# Release core followed by an optional "-prerelease" / "+build" suffix
_VERSION_PARTS = re.compile(r"^(?P<core>[^-+]*)(?P<suffix>.*)$")


def normalize_version(version: str) -> str:
    """Right-pad a partial version to ``major.minor.patch``.

    The padding applies to the release core only, so any pre-release or
    build suffix is preserved. A leading ``v`` or ``=`` is dropped, as npm
    does. Already complete versions are returned unchanged.

    Examples:
        >>> normalize_version("4")
        '4.0.0'
        >>> normalize_version("4.1")
        '4.1.0'
        >>> normalize_version("4-beta.1")
        '4.0.0-beta.1'
        >>> normalize_version("4.1.2")
        '4.1.2'
    """
    cleaned = version.strip().lstrip("=v")
    match = _VERSION_PARTS.match(cleaned)
    assert match is not None

    parts = match.group("core").split(".")
    while len(parts) < 3:
        parts.append("0")
    return ".".join(parts) + match.group("suffix")


def parse_version(version: str) -> Optional[Version]:
    """Parse *version* (after normalization), or return ``None`` if invalid."""
    try:
        return Version(normalize_version(version))
    except ValueError:
        return None


def release_core(version: Version) -> Version:
    """Strip pre-release and build metadata, keeping ``major.minor.patch``."""
    return Version(major=version.major, minor=version.minor, patch=version.patch)


def meets_minimum(version: str, minimum: str) -> bool:
    """Check ``version >= minimum`` under semver precedence.

    Both sides are normalized first. An unparseable *version* never meets
    the minimum.

    Raises:
        ValueError: *minimum* is not a valid (partial) semantic version.
    """
    threshold = parse_version(minimum)
    if threshold is None:
        raise ValueError(f"Invalid minimum version: {minimum!r}")

    parsed = parse_version(version)
    return parsed is not None and parsed >= threshold


def parse_range(range_expr: str) -> Optional[NpmSpec]:
    """Parse an npm range expression, or return ``None`` if unsupported.

    An empty range means "any version". Non-semver specifiers that npm
    accepts in manifests (git URLs, ``file:`` paths, ``npm:`` aliases,
    dist-tags) are not ranges and yield ``None``.
    """
    text = range_expr.strip() or "*"
    try:
        return NpmSpec(text)
    except ValueError:
        return None


def max_satisfying(
    versions: Iterable[str],
    spec: NpmSpec,
    *,
    include_prerelease: bool = False,
) -> Optional[str]:
    """Return the highest version in *versions* matched by *spec*.

    The raw version string is returned so it can be used as a manifest key.
    With ``include_prerelease=False`` pre-release versions are never
    considered. With ``include_prerelease=True`` any pre-release inside the
    range's bounds matches, as with npm's ``includePrerelease`` option:
    ``*`` admits ``1.0.0-alpha.1`` and ``^2.0.0`` admits ``2.1.0-beta.1``,
    but ``2.0.0-rc.1`` still sorts below ``>=2.0.0``.
    """
    best: Optional[Version] = None
    best_raw: Optional[str] = None

    for raw in versions:
        parsed = parse_version(raw)
        if parsed is None:
            continue
        if parsed.prerelease:
            if not include_prerelease:
                continue
            if not _match_including_prereleases(spec.clause, parsed):
                continue
        elif not spec.match(parsed):
            continue
        if best is None or parsed > best:
            best, best_raw = parsed, raw

    return best_raw


def _match_including_prereleases(clause: Any, version: Version) -> bool:
    """Evaluate a compiled npm range with every pre-release admitted.

    ``NpmSpec`` compiles each comparator with the same-patch policy, which
    only lets ``1.2.3-x`` through when the comparator itself names a
    ``1.2.3`` pre-release. Here such comparators are re-evaluated under the
    natural policy: plain precedence, except that ``<3.0.0`` still excludes
    ``3.0.0-x``.
    """
    if isinstance(clause, AnyOf):
        return any(_match_including_prereleases(c, version) for c in clause.clauses)
    if isinstance(clause, AllOf):
        return all(_match_including_prereleases(c, version) for c in clause.clauses)
    if isinstance(clause, Range) and clause.prerelease_policy == Range.PRERELEASE_SAMEPATCH:
        clause = Range(
            clause.operator,
            clause.target,
            prerelease_policy=Range.PRERELEASE_NATURAL,
            build_policy=clause.build_policy,
        )
    return clause.match(version)
