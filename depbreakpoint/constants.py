"""
Centralized constants for depbreakpoint.

This module defines immutable configuration values used across
depbreakpoint: registry endpoints, network settings, traversal limits and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "depbreakpoint/{version} (+https://www.npmjs.com)"

# ---------------------------------------------------------------------------
# Registry endpoints
# ---------------------------------------------------------------------------

#: Default npm registry base URL.
DEFAULT_REGISTRY_URL: Final[str] = "https://registry.npmjs.org"

#: Accept header asking for the abbreviated ("corgi") install metadata, which
#: carries every version's dependency maps at a fraction of the full size.
ABBREVIATED_METADATA_ACCEPT: Final[str] = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"
)

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Retries granted to 429 responses, separate from DEFAULT_MAX_RETRIES.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

#: Maximum number of registry fetches in flight at once.
DEFAULT_CONCURRENT_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Traversal limits
# ---------------------------------------------------------------------------

#: Node-visit ceiling for one dependency-tree traversal.
DEFAULT_MAX_NODES: Final[int] = 3000

#: Separator between hops in an occurrence path string.
PATH_SEPARATOR: Final[str] = " > "

# ---------------------------------------------------------------------------
# CLI exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: Final[int] = 0
EXIT_USAGE_ERROR: Final[int] = 1
EXIT_NOT_FOUND: Final[int] = 2
EXIT_INTERRUPTED: Final[int] = 130
EXIT_UNEXPECTED: Final[int] = 99

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
