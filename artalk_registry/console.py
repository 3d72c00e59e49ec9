"""Shared rich consoles and the one-line status formats used by every command."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, soft_wrap=True)


def fail_line(subject: str, message: str, detail: object | None = None) -> str:
    line = f"[red]\\[FAIL][/red] [bold]{escape(subject)}[/bold] - {escape(message)}"
    if detail is not None:
        line += f": [red]{escape(str(detail))}[/red]"
    return line


def done_line(npm_name: str, version: str, *, cached: bool, elapsed_s: float) -> str:
    cached_tag = " [blue]\\[Cached][/blue]" if cached else ""
    return (
        f"[green]\\[DONE][/green] [bold]{escape(npm_name)}[/bold] - v{escape(version)}"
        f"{cached_tag} \\[⏱️ {elapsed_s:.2f}s]"
    )
