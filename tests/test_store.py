import json
from pathlib import Path

import pytest

from artalk_registry.core.entry import RegistryData, RegistryEntry
from artalk_registry.store import (
    FormatError,
    load_registry_cache,
    read_entries,
    read_entries_with_positions,
    write_registry,
)


def _registry_entry(entry_id: str, entry_type: str = "plugin", **overrides: object) -> RegistryEntry:
    payload: dict[str, object] = {
        "type": entry_type,
        "id": entry_id,
        "name": entry_id,
        "description": "Demo",
        "author_name": "Someone",
        "author_link": "https://github.com/someone",
        "repo_name": f"someone/{entry_id}",
        "repo_link": f"https://github.com/someone/{entry_id}",
        "npm_name": entry_id,
        "version": "1.0.0",
    }
    payload.update(overrides)
    return RegistryEntry.model_validate(payload)


def test_read_entries_handles_missing_and_empty_files(tmp_path: Path) -> None:
    assert read_entries(tmp_path / "missing.yaml") == []

    comments_only = tmp_path / "plugins.yaml"
    comments_only.write_text("# nothing declared yet\n", encoding="utf-8")
    assert read_entries(comments_only) == []


def test_read_entries_preserves_file_order(tmp_path: Path) -> None:
    path = tmp_path / "plugins.yaml"
    path.write_text("- id: zeta\n- id: alpha\n- id: mid\n", encoding="utf-8")

    assert [entry["id"] for entry in read_entries(path)] == ["zeta", "alpha", "mid"]


def test_read_entries_rejects_unparseable_yaml(tmp_path: Path) -> None:
    path = tmp_path / "plugins.yaml"
    path.write_text("- id: [unclosed\n", encoding="utf-8")

    with pytest.raises(FormatError):
        read_entries(path)


def test_read_entries_rejects_non_list_document(tmp_path: Path) -> None:
    path = tmp_path / "plugins.yaml"
    path.write_text("id: lonely\n", encoding="utf-8")

    with pytest.raises(FormatError, match="must contain a list"):
        read_entries(path)


def test_undecodable_files_are_format_errors(tmp_path: Path) -> None:
    path = tmp_path / "plugins.yaml"
    path.write_bytes(b"- id: \xff\xfe\n")
    cache = tmp_path / "registry.json"
    cache.write_bytes(b"{\"plugins\": \xff}")

    with pytest.raises(FormatError, match="not valid UTF-8"):
        read_entries(path)
    with pytest.raises(FormatError, match="not valid UTF-8"):
        read_entries_with_positions(path)
    with pytest.raises(FormatError, match="not valid UTF-8"):
        load_registry_cache(cache)


def test_read_entries_with_positions_reports_lines(tmp_path: Path) -> None:
    path = tmp_path / "themes.yaml"
    path.write_text(
        "# themes\n"
        "- id: first\n"
        "  name: First\n"
        "\n"
        "- id: second\n"
        "  name: Second\n",
        encoding="utf-8",
    )

    positioned = read_entries_with_positions(path)

    assert [item.entry["id"] for item in positioned] == ["first", "second"]
    assert [(item.line, item.column) for item in positioned] == [(2, 3), (5, 3)]


def test_read_entries_with_positions_requires_the_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_entries_with_positions(tmp_path / "missing.yaml")


def test_load_registry_cache_indexes_by_type_and_id(tmp_path: Path) -> None:
    assert len(load_registry_cache(tmp_path / "registry.json")) == 0

    data = RegistryData(
        plugins=[_registry_entry("shared", version="1.0.0")],
        themes=[_registry_entry("shared", entry_type="theme", version="3.0.0")],
    )
    path = write_registry(tmp_path / "dist" / "registry.json", data)
    cache = load_registry_cache(path)

    assert len(cache) == 2
    assert cache.lookup("plugin", "shared").version == "1.0.0"
    assert cache.lookup("theme", "shared").version == "3.0.0"
    assert cache.lookup("plugin", "other") is None


def test_load_registry_cache_rejects_broken_json(tmp_path: Path) -> None:
    path = tmp_path / "registry.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(FormatError):
        load_registry_cache(path)


def test_write_registry_uses_two_space_indent_and_field_order(tmp_path: Path) -> None:
    data = RegistryData(plugins=[_registry_entry("demo", description="评论插件")])
    path = write_registry(tmp_path / "out" / "registry.json", data)

    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "plugins": [\n    {\n      "type": "plugin",\n      "id": "demo",')
    assert "评论插件" in text

    keys = list(json.loads(text)["plugins"][0])
    assert keys == [
        "type",
        "id",
        "name",
        "description",
        "author_name",
        "author_link",
        "donate_link",
        "repo_name",
        "repo_link",
        "npm_name",
        "verified",
        "version",
        "source",
        "integrity",
        "options_schema",
        "updated_at",
        "min_artalk_version",
    ]
    assert json.loads(text)["themes"] == []
