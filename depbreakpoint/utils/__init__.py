"""
Utility helpers for depbreakpoint.

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Async HTTP client
- Semantic-version helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from depbreakpoint.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)
from depbreakpoint.utils.console import (
    get_raw_console,
    print_details,
    print_error,
    print_success,
    print_warning,
    reconfigure_console,
)
from depbreakpoint.utils.http import HTTPClient
from depbreakpoint.utils.version_utils import (
    max_satisfying,
    meets_minimum,
    normalize_version,
    parse_range,
    parse_version,
)

__all__ = [
    # Console
    "print_details",
    "print_error",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # HTTP
    "HTTPClient",
    # Versions
    "max_satisfying",
    "meets_minimum",
    "normalize_version",
    "parse_range",
    "parse_version",
]
