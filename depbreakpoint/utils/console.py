"""
Console output utilities for depbreakpoint using Rich.

User-facing output for CLI commands lives here; diagnostics go through
:mod:`depbreakpoint.utils.logger` instead.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Optional, Sequence

from rich.theme import Theme
from rich.markup import escape
from rich.console import Console

DEPBREAKPOINT_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

_console: Optional[Console] = None
_err_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _build_console(*, stderr: bool) -> Console:
    use_color = _should_use_color()
    return Console(
        theme=DEPBREAKPOINT_THEME,
        no_color=not use_color,
        highlight=use_color,
        stderr=stderr,
    )


def _get_console() -> Console:
    """Return the singleton stdout console."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                _console = _build_console(stderr=False)
    return _console


def _get_err_console() -> Console:
    """Return the singleton stderr console."""
    global _err_console

    if _err_console is None:
        with _console_lock:
            if _err_console is None:
                _err_console = _build_console(stderr=True)
    return _err_console


def reconfigure_console() -> None:
    """Drop the cached consoles so the next call picks up env changes (NO_COLOR)."""
    global _console, _err_console
    with _console_lock:
        _console = None
        _err_console = None


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{escape(prefix)} {escape(message)}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message to stderr."""
    _get_err_console().print(f"{escape(prefix)} {escape(message)}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message to stderr."""
    _get_err_console().print(f"{escape(prefix)} {escape(message)}", style="warning")


def print_details(
    title: str,
    lines: Sequence[str],
    *,
    stderr: bool = False,
) -> None:
    """Print a titled, indented list of evidence lines.

    Nothing is printed when *lines* is empty.

    Args:
        title: Heading shown above the list, e.g. ``"Details"``.
        lines: Evidence lines (occurrence paths, skipped edges, ...).
        stderr: Write to stderr instead of stdout.
    """
    if not lines:
        return

    console = _get_err_console() if stderr else _get_console()
    console.print(f"{escape(title)} ({len(lines)}):", style="info")
    for line in lines:
        console.print(f"  {escape(line)}", style="dim")


def get_raw_console() -> Console:
    """Return the underlying stdout Rich Console instance."""
    return _get_console()
