"""Reading the declared entry lists and reading/writing the built catalog."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from artalk_registry.core.entry import RegistryCache, RegistryData


class FormatError(ValueError):
    """Raised when an entry list or catalog file cannot be parsed."""


@dataclass(frozen=True)
class PositionedEntry:
    entry: Any
    line: int
    column: int


def read_entries(path: str | Path) -> list[Any]:
    """Return the raw records of a YAML entry list in file order."""
    source = Path(path)
    if not source.exists():
        return []
    return _parse_entries(_read_text(source), source)


def read_entries_with_positions(path: str | Path) -> list[PositionedEntry]:
    """Like `read_entries`, but pairs each record with its 1-based line/column.

    A missing file raises FileNotFoundError so that validation cannot pass on a
    list that does not exist.
    """
    source = Path(path)
    text = _read_text(source)
    entries = _parse_entries(text, source)
    if not entries:
        return []

    root = yaml.compose(text, Loader=yaml.SafeLoader)
    nodes = list(root.value) if isinstance(root, yaml.SequenceNode) else []
    positioned: list[PositionedEntry] = []
    for index, entry in enumerate(entries):
        if index < len(nodes):
            mark = nodes[index].start_mark
            positioned.append(PositionedEntry(entry=entry, line=mark.line + 1, column=mark.column + 1))
        else:
            positioned.append(PositionedEntry(entry=entry, line=0, column=0))
    return positioned


def load_registry_cache(path: str | Path) -> RegistryCache:
    """Load the previous build as a cache snapshot; an absent file is an empty cache."""
    source = Path(path)
    if not source.exists():
        return RegistryCache()
    try:
        payload = json.loads(_read_text(source))
        data = RegistryData.model_validate(payload)
    except json.JSONDecodeError as exc:
        raise FormatError(f"cached registry is not valid JSON: {source}: {exc}") from exc
    except ValidationError as exc:
        raise FormatError(f"cached registry has an unexpected shape: {source}: {exc}") from exc
    return RegistryCache(data)


def dump_registry(data: RegistryData) -> str:
    return json.dumps(data.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"


def write_registry(path: str | Path, data: RegistryData) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dump_registry(data), encoding="utf-8")
    return target


def _parse_entries(text: str, source: Path) -> list[Any]:
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FormatError(f"invalid YAML in {source}: {exc}") from exc

    if loaded is None:
        return []
    if not isinstance(loaded, list):
        raise FormatError(f"{source} must contain a list of entries (got {type(loaded).__name__})")
    return loaded


def _read_text(source: Path) -> str:
    try:
        return source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"{source} is not valid UTF-8: {exc}") from exc
