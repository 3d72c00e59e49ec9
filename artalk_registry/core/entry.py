"""Entry models for the declared lists and the published catalog."""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

EntryType = Literal["plugin", "theme"]
ENTRY_TYPES: tuple[EntryType, ...] = ("plugin", "theme")


class LocalEntry(BaseModel):
    """One hand-authored plugin or theme declaration."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    name: str = ""
    description: str = ""
    github_repo: str = ""
    npm_package: str = ""
    author_name: str = ""
    author_link: str = ""
    donate_link: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (bool, int, float)):
            return str(value)
        return value


OPTIONAL_LOCAL_FIELDS = frozenset({"donate_link"})
REQUIRED_LOCAL_FIELDS: tuple[str, ...] = tuple(
    name for name in LocalEntry.model_fields if name not in OPTIONAL_LOCAL_FIELDS
)


class RegistryEntry(BaseModel):
    """A published catalog entry; field order is the serialized order."""

    model_config = ConfigDict(frozen=True)

    type: EntryType
    id: str
    name: str
    description: str
    author_name: str
    author_link: str
    donate_link: str = ""
    repo_name: str
    repo_link: str
    npm_name: str
    verified: bool = False
    version: str = ""
    source: str = ""
    integrity: str = ""
    options_schema: str = ""
    updated_at: str = ""
    min_artalk_version: str = ""


class RegistryData(BaseModel):
    plugins: list[RegistryEntry] = Field(default_factory=list)
    themes: list[RegistryEntry] = Field(default_factory=list)

    def entries(self, entry_type: EntryType) -> list[RegistryEntry]:
        return self.plugins if entry_type == "plugin" else self.themes

    @classmethod
    def from_entries(cls, entries: Iterable[RegistryEntry]) -> "RegistryData":
        """Partition entries by type, keeping their relative order."""
        items = list(entries)
        return cls(
            plugins=[entry for entry in items if entry.type == "plugin"],
            themes=[entry for entry in items if entry.type == "theme"],
        )


class RegistryCache:
    """Read-only snapshot of the previous build, keyed by (type, id)."""

    def __init__(self, data: RegistryData | None = None) -> None:
        index: dict[tuple[str, str], RegistryEntry] = {}
        if data is not None:
            for entry_type in ENTRY_TYPES:
                for entry in data.entries(entry_type):
                    index.setdefault((entry_type, entry.id), entry)
        self._index = MappingProxyType(index)

    def lookup(self, entry_type: EntryType, entry_id: str) -> RegistryEntry | None:
        return self._index.get((entry_type, entry_id))

    def __len__(self) -> int:
        return len(self._index)
