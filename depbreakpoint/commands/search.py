"""Search command implementation for depbreakpoint.

Finds the earliest version of a parent package whose resolved dependency
tree no longer contains a target package, or only contains it at or above
a required minimum version.

Both positional arguments use the ``name[@version]`` form. The split happens
on the last ``@`` so scoped packages work (``@babel/core@7``).

Typical usage::

    # Earliest jest >= 25 whose tree only has minimist >= 1.2.6
    $ find-dep-breakpoint search jest@25 minimist@1.2.6

    # Earliest webpack that no longer pulls in request at all
    $ find-dep-breakpoint search webpack request --removed

    # Removed OR upgraded, machine-readable
    $ find-dep-breakpoint search mocha@5 debug@3.1.0 -r --format json

Exit codes: ``0`` a version was found, ``2`` no version satisfies the
requirement, ``1`` invalid arguments.
"""

from __future__ import annotations

import json
import asyncio
import dataclasses
from typing import Optional

import click
from rich.markup import escape

from depbreakpoint.config import DepBreakpointConfig
from depbreakpoint.context import pass_context, DepBreakpointContext
from depbreakpoint.core import find_compatible_version
from depbreakpoint.exceptions import ValidationError
from depbreakpoint.models import SearchParams, SearchResult
from depbreakpoint.constants import EXIT_NOT_FOUND, EXIT_SUCCESS, EXIT_USAGE_ERROR
from depbreakpoint.utils import (
    get_logger,
    get_raw_console,
    print_details,
    print_error,
    print_success,
    print_warning,
)

logger = get_logger("commands.search")


@click.command()
@click.argument("parent", metavar="PARENT[@MIN]")
@click.argument("target", metavar="TARGET[@MIN]")
@click.option(
    "--removed",
    "-r",
    is_flag=True,
    help="Accept versions whose tree no longer contains TARGET.",
)
@click.option(
    "--registry",
    metavar="URL",
    help="npm registry base URL (overrides configuration).",
)
@click.option(
    "--max-nodes",
    type=click.IntRange(min=1),
    help="Node limit for one dependency-tree traversal (overrides configuration).",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@pass_context
def search(
    ctx: DepBreakpointContext,
    parent: str,
    target: str,
    removed: bool,
    registry: Optional[str],
    max_nodes: Optional[int],
    format: str,
) -> None:
    """Find the earliest PARENT version that fixes TARGET.

    Without ``--removed`` a minimum TARGET version is required and every
    instance of TARGET in the tree must meet it. With ``--removed`` the
    absence of TARGET is accepted; if a minimum is also given, instances at
    or above it are accepted as well.

    Args:
        ctx: depbreakpoint context with configuration and verbosity settings.
        parent: Parent package spec, ``name[@min]``.
        target: Target package spec, ``name[@min]``.
        removed: Whether absence of the target satisfies the requirement.
        registry: Registry URL override.
        max_nodes: Traversal node limit override.
        format: Output format (``text`` or ``json``).
    """
    click_ctx = click.get_current_context()

    params = SearchParams.from_specs(parent, target, package_removed=removed)
    try:
        params.validate()
    except ValidationError as exc:
        print_error(exc.message)
        click_ctx.exit(EXIT_USAGE_ERROR)

    config = _effective_config(ctx.config, registry=registry, max_nodes=max_nodes)
    logger.debug("Search parameters: %s", params.to_dict())

    result = asyncio.run(find_compatible_version(params, config=config))

    if format.lower() == "json":
        _print_json(result)
    else:
        _print_text(result, params.parent_package)

    click_ctx.exit(EXIT_SUCCESS if result.success else EXIT_NOT_FOUND)


def _effective_config(
    config: Optional[DepBreakpointConfig],
    *,
    registry: Optional[str],
    max_nodes: Optional[int],
) -> DepBreakpointConfig:
    """Apply command-line overrides on top of the loaded configuration."""
    base = config or DepBreakpointConfig()
    overrides = {}
    if registry:
        overrides["registry_url"] = registry
    if max_nodes is not None:
        overrides["max_nodes"] = max_nodes
    return dataclasses.replace(base, **overrides) if overrides else base


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _print_text(result: SearchResult, parent: str) -> None:
    if result.success:
        print_success(result.message)
        pinned = escape(f"{parent}@{result.version}")
        get_raw_console().print(f"Earliest parent version: [highlight]{pinned}[/highlight]")
        print_details("Details", result.details)
    else:
        print_error(result.message)
        print_details("Details", result.details, stderr=True)

    if result.skipped_edges:
        print_warning(
            f"{result.skipped_edges} dependency edge(s) could not be followed; "
            "run with -vv for the list"
        )


def _print_json(result: SearchResult) -> None:
    payload = result.to_dict()
    payload["truncated"] = result.truncated
    payload["candidatesEvaluated"] = result.candidates_evaluated
    payload["skippedEdges"] = result.skipped_edges
    click.echo(json.dumps(payload, indent=2))
