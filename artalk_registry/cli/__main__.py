"""Command line interface for the community registry."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from artalk_registry.build import ManifestError, generate_registry
from artalk_registry.config import plugins_file, registry_dist, themes_file, tmp_registry
from artalk_registry.console import console, error_console
from artalk_registry.core.validate import FileValidationResult, validate_file
from artalk_registry.diff import check_diff, emit_diff_output
from artalk_registry.remote.client import FetchError
from artalk_registry.store import FormatError
from artalk_registry.version import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artalk-registry",
        description="Build and check the Artalk community plugin and theme registry.",
    )
    parser.add_argument("--version", action="version", version=f"artalk-registry {__version__}")

    sub = parser.add_subparsers(dest="command")

    validate = sub.add_parser("validate", help="Validate plugins.yaml and themes.yaml")
    validate.add_argument("--root", type=Path, default=None, help="Directory holding the entry lists")
    validate.set_defaults(func=cmd_validate)

    build = sub.add_parser("build", help="Generate dist/registry.json")
    build.add_argument("--root", type=Path, default=None, help="Directory holding the entry lists")
    build.add_argument("--output", type=Path, default=None, help="Catalog path (default: <root>/dist/registry.json)")
    build.set_defaults(func=cmd_build)

    diff = sub.add_parser("diff", help="Compare the built catalog with the latest release asset")
    diff.add_argument("--root", type=Path, default=None, help="Directory holding dist/registry.json")
    diff.add_argument("--repo", type=str, default=None, help="Repository to read the latest release from")
    diff.set_defaults(func=cmd_diff)

    return parser


def cmd_validate(args: argparse.Namespace) -> int:
    console.print("Validating Artalk Community YAML files...")

    ok = True
    for path in (plugins_file(args.root), themes_file(args.root)):
        try:
            result = validate_file(path)
        except (FormatError, FileNotFoundError) as exc:
            console.print(f"\n[red]\\[FAIL][/red] Unable to read \"{escape(str(path))}\": {escape(str(exc))}")
            ok = False
            continue

        if result.empty:
            console.print(f"[yellow]\\[WARN][/yellow] No entries found in \"{escape(str(path))}\".")
        elif result.passed:
            console.print(f"[green]\\[PASS][/green] 🎉 All entries in \"{escape(str(path))}\" are valid.")
        else:
            _print_invalid_entries(result)
            ok = False

    console.print("")
    return 0 if ok else 1


def _print_invalid_entries(result: FileValidationResult) -> None:
    for report in result.invalid_reports:
        location = f"{result.path}:{report.line}:{report.column}"
        console.print(
            f"\n[red]\\[FAIL][/red] 😢 Invalid entry \"[bold red]{escape(report.id)}[/bold red]\" "
            f"in \"{escape(location)}\".\n"
        )

        if report.missing_fields:
            console.print("    [red]Missing fields:[/red]\n")
            names = ", ".join(f'"{name}"' for name in report.missing_fields)
            console.print(f"      \\[{escape(names)}]\n")

        if report.invalid_fields:
            console.print("    [red]Invalid fields:[/red]\n")
            for issue in report.invalid_fields:
                console.print(f"      - \"[red]{escape(issue.field)}[/red]\" {escape(issue.message)}")
            console.print("")


def cmd_build(args: argparse.Namespace) -> int:
    try:
        registry = asyncio.run(generate_registry(args.root, output=args.output))
    except (FormatError, ManifestError, OSError) as exc:
        error_console.print(f"[red]😢 Error generating registry:[/red] {escape(str(exc))}")
        return 1

    console.print("")
    console.print(
        f"[green]🎉 Registry generated successfully![/green] "
        f"({len(registry.plugins)} plugins, {len(registry.themes)} themes)"
    )
    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    try:
        is_diff = asyncio.run(
            check_diff(
                registry_dist(args.root),
                tmp_path=tmp_registry(args.root),
                repo=args.repo,
            )
        )
    except FetchError as exc:
        error_console.print(f"[red]Diff check failed:[/red] {escape(str(exc))}")
        return 1

    emit_diff_output(is_diff)
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = list(argv) if argv is not None else sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
