from pathlib import Path

from artalk_registry.core.validate import invalid_fields, missing_fields, validate_entry, validate_file
from fake_http import local_entry


def test_valid_entry_has_no_issues() -> None:
    report = validate_entry(local_entry("plugin-demo", "artalk-plugin-demo"))

    assert report.valid
    assert report.id == "plugin-demo"
    assert report.missing_fields == []
    assert report.invalid_fields == []


def test_missing_blank_and_null_fields_are_reported() -> None:
    entry = local_entry("plugin-demo", "artalk-plugin-demo", description="   ", author_name=None)
    del entry["github_repo"]

    assert missing_fields(entry) == ["description", "github_repo", "author_name"]


def test_donate_link_is_optional() -> None:
    entry = local_entry("plugin-demo", "artalk-plugin-demo")

    assert "donate_link" not in missing_fields(entry)


def test_non_mapping_entry_misses_every_field() -> None:
    report = validate_entry("just a string", index=3)

    assert not report.valid
    assert report.id == "(unknown id)"
    assert report.index == 3
    assert report.missing_fields == [
        "id",
        "name",
        "description",
        "github_repo",
        "npm_package",
        "author_name",
        "author_link",
    ]
    assert report.invalid_fields == []


def test_link_fields_must_be_http_urls() -> None:
    entry = local_entry(
        "plugin-demo",
        "artalk-plugin-demo",
        author_link="github.com/someone",
        donate_link="ftp://example.com/tip",
        homepage_link="https://example.com",
    )

    issues = [(issue.field, issue.message) for issue in invalid_fields(entry)]
    assert issues == [
        ("author_link", "is not a valid URL."),
        ("donate_link", "is not a valid URL."),
    ]


def test_surrounding_spaces_are_reported_for_any_string_field() -> None:
    entry = local_entry("plugin-demo", " artalk-plugin-demo", name="Demo ", extra_note=" hi")

    issues = [(issue.field, issue.message) for issue in invalid_fields(entry)]
    assert issues == [
        ("name", "should not start or end with a space."),
        ("npm_package", "should not start or end with a space."),
        ("extra_note", "should not start or end with a space."),
    ]


def test_validate_file_collects_every_violation_with_positions(tmp_path: Path) -> None:
    path = tmp_path / "plugins.yaml"
    path.write_text(
        "- id: good\n"
        "  name: Good\n"
        "  description: Fine\n"
        "  github_repo: someone/good\n"
        "  npm_package: artalk-plugin-good\n"
        "  author_name: Someone\n"
        "  author_link: https://github.com/someone\n"
        "- id: bad\n"
        "  name: 'Bad '\n"
        "  author_link: nowhere\n"
        "- name: Anonymous\n",
        encoding="utf-8",
    )

    result = validate_file(path)

    assert not result.passed
    assert len(result.reports) == 3
    invalid = result.invalid_reports
    assert [report.id for report in invalid] == ["bad", "(unknown id)"]
    assert (invalid[0].line, invalid[0].column) == (8, 3)
    assert invalid[0].missing_fields == ["description", "github_repo", "npm_package", "author_name"]
    assert [issue.field for issue in invalid[0].invalid_fields] == ["name", "author_link"]
    assert invalid[1].line == 11
    assert "id" in invalid[1].missing_fields


def test_validate_file_with_no_entries_passes(tmp_path: Path) -> None:
    path = tmp_path / "themes.yaml"
    path.write_text("# no themes yet\n", encoding="utf-8")

    result = validate_file(path)

    assert result.empty
    assert result.passed
