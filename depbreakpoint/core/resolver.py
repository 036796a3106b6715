"""Range resolution for depbreakpoint.

Turns a ``(package, range)`` edge from a manifest into the concrete version
a static resolver would pick: the highest stable version satisfying the
range, falling back to pre-releases only when no stable version does.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from depbreakpoint.core.data_store import RegistryDataStore
from depbreakpoint.models.manifest import PackageManifest
from depbreakpoint.utils.logger import get_logger
from depbreakpoint.utils.version_utils import max_satisfying, parse_range

logger = get_logger("resolver")

__all__ = ["RangeResolver"]


class RangeResolver:
    """Resolve npm ranges against registry manifests, memoized per search.

    Results (including "nothing satisfies") are cached under the exact
    ``(name, range)`` pair. Manifest fetch failures are not cached here;
    they propagate as :class:`~depbreakpoint.exceptions.RegistryError`
    and the data store already remembers them.

    Args:
        data_store: The search's :class:`RegistryDataStore`.
    """

    def __init__(self, data_store: RegistryDataStore) -> None:
        self.data_store = data_store
        self._cache: Dict[Tuple[str, str], Optional[str]] = {}

    async def resolve_version(self, name: str, range_expr: str) -> Optional[str]:
        """Return the concrete version *range_expr* resolves to, or ``None``.

        ``None`` is an expected outcome, e.g. an optional dependency whose
        range was never published, or a non-semver specifier such as a git
        URL.

        Raises:
            RegistryError: The manifest for *name* could not be fetched.
        """
        key = (name, range_expr)
        if key in self._cache:
            return self._cache[key]

        manifest = await self.data_store.get_manifest(name)
        resolved = resolve_in_manifest(manifest, range_expr)
        if resolved is None:
            logger.debug("No version of %s satisfies %r", name, range_expr)

        self._cache[key] = resolved
        return resolved


def resolve_in_manifest(manifest: PackageManifest, range_expr: str) -> Optional[str]:
    """Pick the version of *manifest* that *range_expr* resolves to.

    Dist-tags (``latest``, ``next``) resolve through the manifest's
    ``dist-tags``; anything else must be an npm semver range.
    """
    text = range_expr.strip()

    tagged = manifest.dist_tags.get(text)
    if tagged is not None:
        return tagged if tagged in manifest.versions else None

    spec = parse_range(text)
    if spec is None:
        return None

    versions = manifest.version_strings()
    return max_satisfying(versions, spec) or max_satisfying(
        versions, spec, include_prerelease=True
    )
