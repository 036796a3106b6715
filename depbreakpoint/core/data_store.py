"""Per-search registry metadata store for depbreakpoint.

Holds every package manifest fetched during one search so that the
orchestrator, the range resolver and the traversal share a single registry
round trip per package name.

Typical usage::

    from depbreakpoint.utils.http import HTTPClient
    from depbreakpoint.core.data_store import RegistryDataStore

    async with HTTPClient() as client:
        store = RegistryDataStore(client)
        manifest = await store.get_manifest("axios")
        print(sorted(manifest.versions)[:3])
"""

from __future__ import annotations

import asyncio
from urllib.parse import quote
from typing import Any, Dict, List

from depbreakpoint.exceptions import NetworkError, RegistryError
from depbreakpoint.models.manifest import PackageManifest
from depbreakpoint.utils.http import HTTPClient
from depbreakpoint.utils.logger import get_logger
from depbreakpoint.constants import (
    ABBREVIATED_METADATA_ACCEPT,
    DEFAULT_CONCURRENT_LIMIT,
    DEFAULT_REGISTRY_URL,
)

logger = get_logger("data_store")

__all__ = ["RegistryDataStore"]


class RegistryDataStore:
    """Async-safe cache of registry manifests, scoped to one search.

    Each package name triggers **at most one** registry request for the
    lifetime of the store. Concurrent callers asking for the same uncached
    name await one shared in-flight fetch instead of issuing their own. A
    failed fetch is remembered too and re-raised to later callers without
    another round trip. A :class:`asyncio.Semaphore` caps the number of
    distinct fetches in flight.

    Nothing is ever evicted; the store is meant to be discarded at the end
    of the search that created it.

    Args:
        http_client: A configured :class:`HTTPClient` (owns the connection
            pool).
        registry_url: Base URL of the npm-compatible registry.
        concurrent_limit: Maximum number of registry fetches in flight.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        *,
        registry_url: str = DEFAULT_REGISTRY_URL,
        concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT,
    ) -> None:
        self.http_client = http_client
        self.registry_url = registry_url.rstrip("/")
        self._semaphore = asyncio.Semaphore(concurrent_limit)

        # Exact package name -> manifest / remembered failure
        self._manifests: Dict[str, PackageManifest] = {}
        self._failures: Dict[str, RegistryError] = {}

        # Exact package name -> fetch shared by concurrent callers
        self._inflight: Dict[str, "asyncio.Future[PackageManifest]"] = {}

        #: Number of registry requests actually issued.
        self.fetch_count: int = 0

    # ------------------------------------------------------------------
    # Public async accessors
    # ------------------------------------------------------------------

    async def get_manifest(self, name: str) -> PackageManifest:
        """Fetch (or return cached) metadata for *name*.

        Args:
            name: Exact registry package name (``"@scope/pkg"`` allowed).

        Returns:
            The :class:`PackageManifest` for *name*, identical on every call.

        Raises:
            RegistryError: The registry answered with a non-success status,
                could not be reached, or returned a malformed payload.
        """
        cached = self._manifests.get(name)
        if cached is not None:
            return cached

        failure = self._failures.get(name)
        if failure is not None:
            raise failure

        pending = self._inflight.get(name)
        if pending is None:
            pending = asyncio.ensure_future(self._load(name))
            self._inflight[name] = pending

        # One cancelled caller must not cancel the fetch for the others
        return await asyncio.shield(pending)

    async def get_versions(self, name: str) -> List[str]:
        """Return every published version string of *name*.

        Raises:
            RegistryError: See :meth:`get_manifest`.
        """
        manifest = await self.get_manifest(name)
        return manifest.version_strings()

    async def close(self) -> None:
        """Cancel fetches still in flight and wait for them to settle.

        The owning search calls this before its HTTP client is closed, so no
        shielded fetch keeps running against a closed client.
        """
        pending = list(self._inflight.values())
        if not pending:
            return

        logger.debug("Cancelling %d in-flight metadata fetch(es)", len(pending))
        for future in pending:
            future.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()

    def package_url(self, name: str) -> str:
        """Return the metadata URL for *name*.

        The name is encoded as one path segment (``@scope/pkg`` becomes
        ``@scope%2Fpkg``), which is the form the npm registry expects.
        """
        return f"{self.registry_url}/{quote(name, safe='@')}"

    # ------------------------------------------------------------------
    # Fetching (private)
    # ------------------------------------------------------------------

    async def _load(self, name: str) -> PackageManifest:
        """Fetch, parse and cache one manifest, recording any failure."""
        try:
            async with self._semaphore:
                self.fetch_count += 1
                payload = await self._fetch_from_registry(name)
            manifest = PackageManifest.from_registry(name, payload)
        except NetworkError as exc:
            error = _as_registry_error(name, exc)
            self._failures[name] = error
            logger.debug("Metadata fetch failed for %s: %s", name, error)
            if error is exc:
                raise
            raise error from exc
        else:
            self._manifests[name] = manifest
            logger.debug(
                "Fetched metadata for %s (%d versions)", name, len(manifest.versions)
            )
            return manifest
        finally:
            self._inflight.pop(name, None)

    async def _fetch_from_registry(self, name: str) -> Dict[str, Any]:
        """GET the abbreviated metadata document for *name*."""
        return await self.http_client.get_json(
            self.package_url(name),
            headers={"Accept": ABBREVIATED_METADATA_ACCEPT},
        )


def _as_registry_error(name: str, exc: NetworkError) -> RegistryError:
    """Attach the package name to a transport-level failure."""
    if isinstance(exc, RegistryError) and exc.package_name == name:
        return exc
    if exc.status_code == 404:
        return RegistryError(
            f"Package '{name}' not found in registry",
            package_name=name,
            url=exc.url,
            status_code=404,
        )
    return RegistryError(
        f"Failed to fetch metadata for '{name}': {exc.message}",
        package_name=name,
        url=exc.url,
        status_code=exc.status_code,
    )
