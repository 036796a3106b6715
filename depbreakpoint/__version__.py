"""
depbreakpoint version information.

Single source of truth for the package version, read by packaging metadata,
the CLI ``--version`` flag and the outbound User-Agent header.
"""

from __future__ import annotations

__version__ = "0.3.0"

#: Human-readable version (for CLI banners and debug logs).
VERSION_STRING = f"depbreakpoint {__version__}"
