from artalk_registry.core.entry import (
    LocalEntry,
    RegistryCache,
    RegistryData,
    RegistryEntry,
)

__all__ = [
    "LocalEntry",
    "RegistryCache",
    "RegistryData",
    "RegistryEntry",
]
