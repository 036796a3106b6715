"""Search orchestration for depbreakpoint.

This module ties the per-search components together and implements the
breakpoint search itself: walk the parent package's versions in trial order
and return the first one whose dependency tree satisfies the requirement.

Every search gets a fresh :class:`~depbreakpoint.core.data_store.RegistryDataStore`
and :class:`~depbreakpoint.core.resolver.RangeResolver`, so two searches
never share cached registry state. Within a search, each package manifest
is fetched at most once across all candidates.

Typical usage::

    from depbreakpoint.core.finder import find_compatible_version
    from depbreakpoint.models import SearchParams

    params = SearchParams(
        parent_package="jest",
        parent_min_version="25",
        child_package="minimist",
        child_min_version="1.2.6",
    )
    result = await find_compatible_version(params)
    print(result.success, result.version, result.message)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from depbreakpoint.config import DepBreakpointConfig
from depbreakpoint.core.candidates import order_candidates
from depbreakpoint.core.data_store import RegistryDataStore
from depbreakpoint.core.evaluator import CompatibilityEvaluator
from depbreakpoint.core.resolver import RangeResolver
from depbreakpoint.core.traversal import DependencyTraversal
from depbreakpoint.exceptions import DepBreakpointError, RegistryError, ValidationError
from depbreakpoint.models.search import SearchParams, SearchResult
from depbreakpoint.utils.http import HTTPClient
from depbreakpoint.utils.logger import get_logger

logger = get_logger("finder")

__all__ = ["VersionFinder", "find_compatible_version"]

_TRUNCATION_NOTE = "dependency traversal hit the node limit; results may be incomplete"


class VersionFinder:
    """Find the earliest parent version whose tree satisfies a requirement.

    Candidates are tried stable-ascending, then pre-release-ascending, and
    the search stops at the first success. Registry failures for
    dependencies deep in a tree are skipped; only a failure to fetch the
    parent package itself ends the search early.

    Args:
        http_client: Client used for every registry request. The caller
            owns it and is responsible for closing it.
        config: Search settings; defaults are used when omitted.

    Example::

        >>> async with HTTPClient() as http:
        ...     finder = VersionFinder(http)
        ...     result = await finder.find_compatible_version(params)
    """

    def __init__(
        self,
        http_client: HTTPClient,
        config: Optional[DepBreakpointConfig] = None,
    ) -> None:
        self.http_client = http_client
        self.config = config or DepBreakpointConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def find_compatible_version(self, params: SearchParams) -> SearchResult:
        """Run one search.

        Never raises for expected failures: invalid input, unknown parent
        packages and registry errors all come back as a failed
        :class:`SearchResult` with a descriptive message.
        """
        try:
            params.validate()
        except ValidationError as exc:
            logger.debug("Rejected search parameters: %s", exc)
            return SearchResult.failure(exc.message)

        try:
            return await self._search(params)
        except DepBreakpointError as exc:
            logger.error("Search failed: %s", exc)
            return SearchResult.failure(f"Error during search: {exc.message}")
        except Exception as exc:
            logger.exception("Unexpected error during search")
            return SearchResult.failure(f"Error during search: {exc}")

    # ------------------------------------------------------------------
    # Search (private)
    # ------------------------------------------------------------------

    async def _search(self, params: SearchParams) -> SearchResult:
        data_store = RegistryDataStore(
            self.http_client,
            registry_url=self.config.registry_url,
            concurrent_limit=self.config.concurrent_limit,
        )
        try:
            return await self._search_with(data_store, params)
        finally:
            await data_store.close()

    async def _search_with(
        self,
        data_store: RegistryDataStore,
        params: SearchParams,
    ) -> SearchResult:
        parent = params.parent_package
        child = params.child_package

        traversal = DependencyTraversal(
            data_store,
            RangeResolver(data_store),
            max_nodes=self.config.max_nodes,
        )
        evaluator = CompatibilityEvaluator(child)

        try:
            versions = await data_store.get_versions(parent)
        except RegistryError as exc:
            return SearchResult.failure(
                f"Failed to fetch versions for '{parent}': {exc.message}"
            )

        if not versions:
            return SearchResult.failure(f"No versions found for package '{parent}'")

        candidates = order_candidates(parent, versions, params.parent_min_version)
        if not candidates:
            if params.parent_min_version:
                return SearchResult.failure(
                    f"No versions of '{parent}' found that are >= "
                    f"{params.parent_min_version}"
                )
            return SearchResult.failure(
                f"No valid semantic versions found for package '{parent}'"
            )

        logger.info(
            "Searching %d candidate version(s) of %s for %s",
            len(candidates),
            parent,
            child,
        )

        evaluated = 0
        skipped = 0
        truncated_any = False

        for candidate in candidates:
            evaluated += 1
            logger.info("Checking %s (%s)", candidate, candidate.label)

            outcome = await traversal.traverse(parent, candidate.version, child)
            skipped += len(outcome.skipped_edges)
            truncated_any = truncated_any or outcome.truncated

            verdict = evaluator.evaluate(
                outcome.occurrences,
                params.child_min_version,
                params.package_removed,
            )
            if not verdict.success:
                logger.debug("%s rejected: %s", candidate, verdict.message)
                continue

            message = f"Version {candidate.version} ({candidate.label}) - {verdict.message}"
            details = list(verdict.details)
            if truncated_any:
                message = f"{message} ({_TRUNCATION_NOTE})"
            if outcome.truncated and not outcome.found:
                details.append(
                    f"'{child}' was not seen before the node limit of "
                    f"{self.config.max_nodes}; its absence is not guaranteed"
                )

            logger.info("Found compatible version %s", candidate)
            return SearchResult(
                success=True,
                version=candidate.version,
                message=message,
                details=details,
                truncated=truncated_any,
                candidates_evaluated=evaluated,
                skipped_edges=skipped,
            )

        message = (
            "No compatible version found for the given requirements "
            f"({evaluated} candidate(s) evaluated)"
        )
        if truncated_any:
            message = f"{message} ({_TRUNCATION_NOTE})"

        logger.info("No compatible version of %s found", parent)
        return SearchResult.failure(
            message,
            truncated=truncated_any,
            candidates_evaluated=evaluated,
            skipped_edges=skipped,
        )


async def find_compatible_version(
    params: Union[SearchParams, Mapping[str, Any]],
    *,
    config: Optional[DepBreakpointConfig] = None,
    http_client: Optional[HTTPClient] = None,
) -> SearchResult:
    """Search for the earliest parent version satisfying *params*.

    Args:
        params: A :class:`SearchParams`, or its camelCase dict form
            (``parentPackage``, ``parentMinVersion``, ``childPackage``,
            ``childMinVersion``, ``packageRemoved``).
        config: Search settings; defaults are used when omitted.
        http_client: Optional shared client. When omitted, a client is
            created from *config* and closed before returning.

    Returns:
        The :class:`SearchResult`. Expected failures never raise.
    """
    if not isinstance(params, SearchParams):
        params = SearchParams.from_dict(params)

    config = config or DepBreakpointConfig()

    if http_client is not None:
        return await VersionFinder(http_client, config).find_compatible_version(params)

    client = HTTPClient(
        timeout=config.timeout,
        max_retries=config.max_retries,
        max_concurrency=config.concurrent_limit,
    )
    try:
        return await VersionFinder(client, config).find_compatible_version(params)
    finally:
        await client.close()
