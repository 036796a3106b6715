"""Candidate ordering for the parent-version search.

The search wants the *earliest* parent version that qualifies, preferring
stable releases. Candidates are therefore tried stable-ascending first and
pre-release-ascending second, and the orchestrator stops at the first match.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from semantic_version import Version

from depbreakpoint.exceptions import ValidationError
from depbreakpoint.models.graph import VersionCandidate
from depbreakpoint.utils.logger import get_logger
from depbreakpoint.utils.version_utils import parse_version, release_core

logger = get_logger("candidates")

__all__ = ["order_candidates"]


def order_candidates(
    package: str,
    versions: Iterable[str],
    floor: Optional[str] = None,
) -> List[VersionCandidate]:
    """Return the parent versions to try, in trial order.

    Versions that are not valid semver are dropped. When *floor* is given
    (partial floors such as ``"1"`` are padded), only versions at or above
    it are kept. A stable floor is compared against each version's
    ``major.minor.patch`` core, so ``1.0.0-beta.1`` survives a floor of
    ``1.0.0``; a pre-release floor is compared with full precedence.

    Args:
        package: Parent package name, carried on each candidate.
        versions: Every published version string.
        floor: Lowest acceptable version; empty or ``None`` disables the
            filter.

    Returns:
        Stable versions ascending, followed by pre-releases ascending.
        Empty when nothing passes the filter.

    Raises:
        ValidationError: *floor* is not a valid (partial) version.

    Example::

        >>> [c.version for c in order_candidates(
        ...     "pkg", ["1.0.0", "1.0.0-beta.1", "0.9.0", "2.0.0"], "1.0.0")]
        ['1.0.0', '2.0.0', '1.0.0-beta.1']
    """
    threshold: Optional[Version] = None
    if floor:
        threshold = parse_version(floor)
        if threshold is None:
            raise ValidationError(f"Invalid minimum version '{floor}'", field="floor")

    stable: List[Tuple[Version, str]] = []
    prerelease: List[Tuple[Version, str]] = []

    for raw in versions:
        parsed = parse_version(raw)
        if parsed is None:
            logger.debug("Ignoring non-semver version %s@%s", package, raw)
            continue

        if threshold is not None:
            compared = parsed if threshold.prerelease else release_core(parsed)
            if compared < threshold:
                continue

        (prerelease if parsed.prerelease else stable).append((parsed, raw))

    # Raw string breaks ties between versions differing only in build metadata
    stable.sort(key=lambda item: (item[0], item[1]))
    prerelease.sort(key=lambda item: (item[0], item[1]))

    return [
        VersionCandidate(package=package, version=raw, prerelease=False)
        for _, raw in stable
    ] + [
        VersionCandidate(package=package, version=raw, prerelease=True)
        for _, raw in prerelease
    ]
