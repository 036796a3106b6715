"""
Registry manifest model for depbreakpoint.

A manifest is the registry's published metadata for one package: every
published version together with that version's dependency range maps.
Manifests are immutable once built and are shared by every consumer of the
per-search data store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from depbreakpoint.exceptions import RegistryError


def _range_map(value: Any) -> Dict[str, str]:
    """Coerce a manifest ``name -> range`` section into a clean dict.

    Non-mapping sections and non-string ranges (seen in very old
    publishes) are dropped rather than failing the whole manifest.
    """
    if not isinstance(value, Mapping):
        return {}
    return {
        str(name): spec for name, spec in value.items() if isinstance(spec, str)
    }


@dataclass(frozen=True)
class VersionRecord:
    """Dependency information for one published version.

    Attributes:
        version: Exact version string as published.
        dependencies: Runtime dependencies (name -> range).
        optional_dependencies: Optional dependencies (name -> range).
        peer_dependencies: Peer dependencies (name -> range). Recorded for
            completeness; traversal never expands them.
    """

    version: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    optional_dependencies: Mapping[str, str] = field(default_factory=dict)
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)

    def installable_dependencies(self) -> Dict[str, str]:
        """Return ``dependencies`` merged with ``optional_dependencies``.

        Optional entries win on a name collision, matching how npm treats a
        package listed in both sections.
        """
        merged = dict(self.dependencies)
        merged.update(self.optional_dependencies)
        return merged

    @classmethod
    def from_registry(cls, version: str, payload: Any) -> Optional["VersionRecord"]:
        """Build a record from one entry of a manifest's ``versions`` map.

        Returns ``None`` when the entry is not a JSON object.
        """
        if not isinstance(payload, Mapping):
            return None
        return cls(
            version=version,
            dependencies=_range_map(payload.get("dependencies")),
            optional_dependencies=_range_map(payload.get("optionalDependencies")),
            peer_dependencies=_range_map(payload.get("peerDependencies")),
        )


@dataclass(frozen=True)
class PackageManifest:
    """Version-indexed metadata for a single registry package.

    Attributes:
        name: Package name exactly as requested from the registry.
        versions: Published version string -> :class:`VersionRecord`.
        dist_tags: Registry dist-tags (``latest``, ``next``, ...).
    """

    name: str
    versions: Mapping[str, VersionRecord] = field(default_factory=dict)
    dist_tags: Mapping[str, str] = field(default_factory=dict)

    def get_version(self, version: str) -> Optional[VersionRecord]:
        """Return the record for *version*, or ``None`` if unpublished."""
        return self.versions.get(version)

    def version_strings(self) -> List[str]:
        """Return every published version string, in registry order."""
        return list(self.versions)

    @classmethod
    def from_registry(cls, name: str, payload: Any) -> "PackageManifest":
        """Parse a registry metadata document.

        Works for both the full document and the abbreviated
        ``application/vnd.npm.install-v1+json`` form.

        Raises:
            RegistryError: *payload* is not an object or has no ``versions``
                object.
        """
        if not isinstance(payload, Mapping):
            raise RegistryError(
                f"Malformed metadata for '{name}': expected a JSON object",
                package_name=name,
            )

        raw_versions = payload.get("versions")
        if not isinstance(raw_versions, Mapping):
            raise RegistryError(
                f"Malformed metadata for '{name}': missing 'versions' object",
                package_name=name,
            )

        versions: Dict[str, VersionRecord] = {}
        for version, entry in raw_versions.items():
            record = VersionRecord.from_registry(version, entry)
            if record is not None:
                versions[version] = record

        return cls(
            name=name,
            versions=versions,
            dist_tags=_range_map(payload.get("dist-tags")),
        )
