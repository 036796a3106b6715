"""Configuration file loader for depbreakpoint.

Supports two formats:

- ``depbreakpoint.toml``: settings under a ``[depbreakpoint]`` table
- ``pyproject.toml``: settings under a ``[tool.depbreakpoint]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DEPBREAKPOINT_CONFIG``
2. ``depbreakpoint.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.depbreakpoint]`` section

Precedence: defaults < config file < CLI options.

Example (``depbreakpoint.toml``)::

    [depbreakpoint]
    registry_url = "https://registry.npmjs.org"
    max_nodes = 5000
    timeout = 20
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, fields

from depbreakpoint.exceptions import ConfigError
from depbreakpoint.utils.logger import get_logger
from depbreakpoint.constants import (
    DEFAULT_CONCURRENT_LIMIT,
    DEFAULT_MAX_NODES,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REGISTRY_URL,
    DEFAULT_TIMEOUT,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "depbreakpoint.toml"
SECTION_NAME = "depbreakpoint"


@dataclass
class DepBreakpointConfig:
    """Parsed and validated depbreakpoint configuration.

    Every field has a default, so an empty file (or no file) is valid.

    Attributes:
        registry_url: Base URL of the npm-compatible registry.
        max_nodes: Node-visit ceiling for one dependency-tree traversal.
        timeout: HTTP timeout in seconds.
        max_retries: Retries for transient HTTP failures.
        concurrent_limit: Maximum registry fetches in flight at once.
        source_path: Path of the loaded file, or ``None`` for defaults.
    """

    registry_url: str = DEFAULT_REGISTRY_URL
    max_nodes: int = DEFAULT_MAX_NODES
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT

    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return user-facing options as a dict for debug logging."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if f.name != "source_path"
        }


# name -> (type, minimum or None)
_OPTIONS: Dict[str, Any] = {
    "registry_url": (str, None),
    "max_nodes": (int, 1),
    "timeout": (int, 1),
    "max_retries": (int, 0),
    "concurrent_limit": (int, 1),
}


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to the config file, or ``None`` if none was found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, candidate)
        return candidate

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.%s] in pyproject.toml: %s", SECTION_NAME, pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True if *path* has a ``[tool.depbreakpoint]`` table.

    Unreadable or invalid files count as "no section" so that discovery
    falls back to defaults.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return SECTION_NAME in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> DepBreakpointConfig:
    """Load and validate configuration, falling back to defaults.

    Args:
        config_path: Explicit path to a config file; ``None`` auto-discovers.

    Returns:
        A validated :class:`DepBreakpointConfig`.

    Raises:
        ConfigError: The file cannot be parsed, has unknown keys, or has
            invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return DepBreakpointConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(SECTION_NAME, {})
    else:
        section = raw.get(SECTION_NAME, {})

    if not section:
        logger.debug("Config file found but no %s section, using defaults", SECTION_NAME)
        return DepBreakpointConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DepBreakpointConfig:
    """Validate a ``[depbreakpoint]`` table and build the config from it.

    Raises:
        ConfigError: Unknown keys, wrong types or out-of-range values.
    """
    unknown = set(section) - set(_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    config = DepBreakpointConfig()

    for option, (expected, minimum) in _OPTIONS.items():
        if option not in section:
            continue
        value = section[option]

        # bool is an int subclass; reject it for numeric options
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"{option} must be {'a string' if expected is str else 'an integer'}, "
                f"got {type(value).__name__}",
                config_path=config_path,
                option=option,
            )
        if minimum is not None and value < minimum:
            raise ConfigError(
                f"{option} must be >= {minimum}, got {value}",
                config_path=config_path,
                option=option,
            )
        if expected is str and not value.strip():
            raise ConfigError(
                f"{option} must not be empty",
                config_path=config_path,
                option=option,
            )

        setattr(config, option, value)

    return config
