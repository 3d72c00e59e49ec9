"""Artalk community registry: validate, build and diff the plugin/theme catalog."""

from artalk_registry.build import build_registry, generate_registry
from artalk_registry.core import LocalEntry, RegistryCache, RegistryData, RegistryEntry
from artalk_registry.diff import check_diff
from artalk_registry.version import __version__

__all__ = [
    "__version__",
    "LocalEntry",
    "RegistryCache",
    "RegistryData",
    "RegistryEntry",
    "build_registry",
    "check_diff",
    "generate_registry",
]
