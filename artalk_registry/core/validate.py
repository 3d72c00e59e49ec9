"""Structural checks for the declared plugin and theme lists."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from artalk_registry.core.entry import LocalEntry, REQUIRED_LOCAL_FIELDS
from artalk_registry.store import read_entries_with_positions

_URL_RE = re.compile(r"^https?://")
_UNKNOWN_ID = "(unknown id)"


class FieldIssue(BaseModel):
    field: str
    message: str


class EntryReport(BaseModel):
    index: int = 0
    id: str = _UNKNOWN_ID
    line: int = 0
    column: int = 0
    missing_fields: list[str] = Field(default_factory=list)
    invalid_fields: list[FieldIssue] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing_fields and not self.invalid_fields


class FileValidationResult(BaseModel):
    path: Path
    reports: list[EntryReport] = Field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.reports

    @property
    def invalid_reports(self) -> list[EntryReport]:
        return [report for report in self.reports if not report.valid]

    @property
    def passed(self) -> bool:
        return not self.invalid_reports


def missing_fields(entry: Any) -> list[str]:
    if not isinstance(entry, dict):
        return list(REQUIRED_LOCAL_FIELDS)
    return [
        name
        for name in REQUIRED_LOCAL_FIELDS
        if entry.get(name) is None or str(entry[name]).strip() == ""
    ]


def invalid_fields(entry: Any) -> list[FieldIssue]:
    if not isinstance(entry, dict):
        return []

    issues: list[FieldIssue] = []
    for key in _ordered_fields(entry):
        name, value = str(key), entry[key]
        if name.endswith("_link") and not _URL_RE.match(str(value)):
            issues.append(FieldIssue(field=name, message="is not a valid URL."))
        if isinstance(value, str) and (value.startswith(" ") or value.endswith(" ")):
            issues.append(FieldIssue(field=name, message="should not start or end with a space."))
    return issues


def validate_entry(entry: Any, *, index: int = 0, line: int = 0, column: int = 0) -> EntryReport:
    entry_id = entry.get("id") if isinstance(entry, dict) else None
    return EntryReport(
        index=index,
        id=str(entry_id) if entry_id else _UNKNOWN_ID,
        line=line,
        column=column,
        missing_fields=missing_fields(entry),
        invalid_fields=invalid_fields(entry),
    )


def validate_file(path: str | Path) -> FileValidationResult:
    """Validate every entry of one list file without stopping at the first failure."""
    source = Path(path)
    reports = [
        validate_entry(item.entry, index=index, line=item.line, column=item.column)
        for index, item in enumerate(read_entries_with_positions(source))
    ]
    return FileValidationResult(path=source, reports=reports)


def _ordered_fields(entry: dict[Any, Any]) -> list[Any]:
    known = [name for name in LocalEntry.model_fields if name in entry]
    extra = [name for name in entry if name not in LocalEntry.model_fields]
    return known + extra
