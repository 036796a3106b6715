"""
Command-line interface for depbreakpoint.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from depbreakpoint.config import load_config
from depbreakpoint.__version__ import __version__
from depbreakpoint.context import DepBreakpointContext
from depbreakpoint.exceptions import ConfigError, DepBreakpointError
from depbreakpoint.utils.logger import get_logger, setup_logging
from depbreakpoint.utils.console import print_error, print_warning, reconfigure_console
from depbreakpoint.constants import (
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED,
    EXIT_USAGE_ERROR,
)

logger = get_logger("cli")


@click.group(
    name="find-dep-breakpoint",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="DEPBREAKPOINT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DEPBREAKPOINT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="depbreakpoint",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """find-dep-breakpoint: find the npm version that fixes a dependency.

    \b
    Available commands:
      find-dep-breakpoint search   Find the earliest satisfying parent version

    \b
    Examples:
      find-dep-breakpoint search jest@25 minimist@1.2.6
      find-dep-breakpoint search webpack request --removed
      find-dep-breakpoint -v search @babel/core@7 json5@2.2.2 --format json

    Use ``find-dep-breakpoint COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(EXIT_USAGE_ERROR) from exc

    breakpoint_ctx = DepBreakpointContext()
    breakpoint_ctx.config_path = config or loaded_config.source_path
    breakpoint_ctx.color = color
    breakpoint_ctx.verbose = verbose
    breakpoint_ctx.config = loaded_config
    ctx.obj = breakpoint_ctx

    # Respect NO_COLOR for Rich and downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    logger.debug("depbreakpoint v%s", __version__)
    logger.debug("Config path: %s", breakpoint_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from depbreakpoint.commands.search import search  # noqa: E402

cli.add_command(search)


def main() -> int:
    """Main entry point for the depbreakpoint CLI.

    Returns:
        Exit code:
            0   Compatible version found
            1   Usage or configuration error
            2   No compatible version found
            130 Interrupted by user (Ctrl+C)
            99  Unexpected error
    """
    try:
        rv = cli(standalone_mode=False)
        return rv if isinstance(rv, int) else EXIT_SUCCESS

    except click.UsageError as exc:
        exc.show()
        return EXIT_USAGE_ERROR

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.Abort:
        print_warning("Operation cancelled by user")
        return EXIT_INTERRUPTED

    except DepBreakpointError as exc:
        print_error(str(exc))
        logger.debug(
            "DepBreakpointError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return EXIT_USAGE_ERROR

    except KeyboardInterrupt:
        print_warning("Operation cancelled by user")
        return EXIT_INTERRUPTED

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())
