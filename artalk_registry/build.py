"""Build `registry.json` from the declared plugin and theme lists."""

from __future__ import annotations

import asyncio
import posixpath
import re
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console

from artalk_registry.config import (
    CLIENT_PACKAGE,
    OPTIONS_SCHEMA_FILENAME,
    VERIFIED_SCOPE,
    plugins_file,
    registry_dist,
    themes_file,
)
from artalk_registry.console import console as stdout_console
from artalk_registry.console import done_line, error_console, fail_line
from artalk_registry.core.entry import EntryType, LocalEntry, RegistryCache, RegistryData, RegistryEntry
from artalk_registry.fetch import MetadataFetcher
from artalk_registry.integrity import IntegrityResolver
from artalk_registry.remote.client import PackageManifest
from artalk_registry.store import load_registry_cache, read_entries, write_registry

_MAIN_PREFIX_RE = re.compile(r"^(\./|/)")
_NON_VERSION_RE = re.compile(r"[^0-9.]")


class ManifestError(RuntimeError):
    """Raised when a published manifest is structurally unusable."""


@dataclass
class BuildContext:
    fetcher: MetadataFetcher = field(default_factory=MetadataFetcher)
    resolver: IntegrityResolver = field(default_factory=IntegrityResolver)
    cache: RegistryCache = field(default_factory=RegistryCache)
    console: Console = field(default_factory=lambda: stdout_console)
    error_console: Console = field(default_factory=lambda: error_console)


def is_verified(npm_package: str) -> bool:
    return npm_package.startswith(VERIFIED_SCOPE)


def main_file(manifest: PackageManifest) -> str:
    if manifest.main is None:
        return ""
    return _MAIN_PREFIX_RE.sub("", str(manifest.main).strip(), count=1)


def min_artalk_version(manifest: PackageManifest, package_name: str) -> str:
    declared = manifest.peer_dependencies.get(CLIENT_PACKAGE)
    if declared is None or not str(declared).strip():
        raise ManifestError(
            f"{package_name} does not declare a peer dependency on '{CLIENT_PACKAGE}'"
        )
    return _NON_VERSION_RE.sub("", str(declared))


def options_schema_url(package_url: str, main: str) -> str:
    directory = posixpath.dirname(main)
    parts = [package_url]
    if directory and directory != ".":
        parts.append(directory)
    parts.append(OPTIONS_SCHEMA_FILENAME)
    return "/".join(parts)


async def build_entry(raw: Any, entry_type: EntryType, context: BuildContext) -> RegistryEntry | None:
    """Resolve one declared entry; None means it is left out of the catalog."""
    started = time.perf_counter()

    try:
        local = LocalEntry.model_validate(raw)
    except ValidationError as exc:
        context.error_console.print(fail_line(str(raw)[:60], "Invalid entry", exc.errors()[0]["msg"]))
        return None

    package_info = await context.fetcher.package_info(local.npm_package)
    if package_info is None:
        return None

    version = package_info.latest
    cached_entry = context.cache.lookup(entry_type, local.id)
    cached = False

    base: dict[str, Any] = {
        "type": entry_type,
        "id": local.id,
        "name": local.name,
        "description": local.description,
        "author_name": local.author_name,
        "author_link": local.author_link,
        "donate_link": local.donate_link,
        "repo_name": local.github_repo,
        "repo_link": f"https://github.com/{local.github_repo}",
        "npm_name": local.npm_package,
        "verified": is_verified(local.npm_package),
    }

    if cached_entry is not None and cached_entry.version == version:
        cached = True
        derived = {
            "version": cached_entry.version,
            "source": cached_entry.source,
            "integrity": cached_entry.integrity,
            "options_schema": cached_entry.options_schema,
            "updated_at": cached_entry.updated_at,
            "min_artalk_version": cached_entry.min_artalk_version,
        }
    else:
        resolved = await _resolve_fresh(local, package_info.manifest(version), version, package_info.time, context)
        if resolved is None:
            return None
        derived = resolved

    entry = RegistryEntry(**base, **derived)
    context.console.print(
        done_line(entry.npm_name, entry.version, cached=cached, elapsed_s=time.perf_counter() - started)
    )
    return entry


async def _resolve_fresh(
    local: LocalEntry,
    manifest: PackageManifest | None,
    version: str,
    publish_times: dict[str, Any],
    context: BuildContext,
) -> dict[str, str] | None:
    if await context.fetcher.repo_info(local.github_repo) is None:
        return None

    if manifest is None:
        context.error_console.print(fail_line(local.npm_package, f"No manifest published for v{version}"))
        return None

    main = main_file(manifest)
    if not main:
        context.error_console.print(fail_line(local.npm_package, "No main file found in package.json"))
        return None

    package_url = context.resolver.cdn.package_url(local.npm_package, version)
    source = f"{package_url}/{main}"
    integrity = await context.resolver.sri_from_url(source)
    if not integrity:
        return None

    options_schema = await context.resolver.resolve_options_schema(options_schema_url(package_url, main))

    return {
        "version": version,
        "source": source,
        "integrity": integrity,
        "options_schema": options_schema,
        "updated_at": str(publish_times.get(version) or ""),
        "min_artalk_version": min_artalk_version(manifest, local.npm_package),
    }


async def build_registry(
    plugins: Sequence[Any],
    themes: Sequence[Any],
    context: BuildContext,
) -> RegistryData:
    """Build every entry concurrently and keep the survivors in declaration order."""
    builds = [build_entry(raw, "plugin", context) for raw in plugins]
    builds += [build_entry(raw, "theme", context) for raw in themes]
    results = await asyncio.gather(*builds)
    return RegistryData.from_entries(entry for entry in results if entry is not None)


async def generate_registry(
    root: str | Path | None = None,
    *,
    fetcher: MetadataFetcher | None = None,
    resolver: IntegrityResolver | None = None,
    console: Console | None = None,
    output: str | Path | None = None,
) -> RegistryData:
    """Read both lists, build against the previous artifact, and write the new one."""
    target = Path(output) if output is not None else registry_dist(root)
    context = BuildContext(
        fetcher=fetcher or MetadataFetcher(console=console),
        resolver=resolver or IntegrityResolver(console=console),
        cache=load_registry_cache(target),
        console=console or stdout_console,
        error_console=console or error_console,
    )

    plugins = read_entries(plugins_file(root))
    themes = read_entries(themes_file(root))
    registry = await build_registry(plugins, themes, context)
    write_registry(target, registry)
    return registry
