"""
Core functionality exports for depbreakpoint.

Importing from here keeps user-facing imports clean and stable:

    from depbreakpoint.core import VersionFinder, find_compatible_version
"""

from __future__ import annotations

from depbreakpoint.core.candidates import order_candidates
from depbreakpoint.core.data_store import RegistryDataStore
from depbreakpoint.core.evaluator import CompatibilityEvaluator, RequirementMode
from depbreakpoint.core.finder import VersionFinder, find_compatible_version
from depbreakpoint.core.resolver import RangeResolver, resolve_in_manifest
from depbreakpoint.core.traversal import DependencyTraversal

__all__ = [
    "CompatibilityEvaluator",
    "DependencyTraversal",
    "RangeResolver",
    "RegistryDataStore",
    "RequirementMode",
    "VersionFinder",
    "find_compatible_version",
    "order_candidates",
    "resolve_in_manifest",
]
