"""
Executable module for depbreakpoint.

Running:
    python -m depbreakpoint

is equivalent to:
    find-dep-breakpoint

This module simply forwards execution to the CLI entrypoint defined in
`depbreakpoint.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("depbreakpoint CLI could not be started.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from depbreakpoint.__version__ import __version__

        sys.stderr.write(f"depbreakpoint version: {__version__}\n")
    except ImportError:
        sys.stderr.write("depbreakpoint version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m depbreakpoint`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from depbreakpoint.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
