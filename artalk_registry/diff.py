"""Decide whether the local catalog differs from the last published release."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from rich.console import Console

from artalk_registry.config import REGISTRY_ASSET_NAME, release_repo
from artalk_registry.console import console as stdout_console
from artalk_registry.remote.client import FetchError, GitHubClient


async def check_diff(
    local_path: str | Path,
    *,
    client: GitHubClient | None = None,
    tmp_path: str | Path | None = None,
    repo: str | None = None,
    console: Console | None = None,
) -> bool:
    """Return True when the local artifact should be published.

    A missing release (404) or a release without the asset counts as a diff.
    Any other failure raises FetchError.
    """
    github = client or GitHubClient()
    out = console or stdout_console
    source_repo = repo or release_repo()

    try:
        release = await github.latest_release(source_repo)
    except FetchError as exc:
        if exc.status_code == 404:
            out.print("No GitHub release found. Api returned 404.")
            return True
        raise

    asset = _find_asset(release.get("assets"))
    if asset is None:
        out.print(f"No {REGISTRY_ASSET_NAME} found in the latest release assets.")
        return True

    download_url = asset.get("browser_download_url")
    if not isinstance(download_url, str) or not download_url:
        raise FetchError(f"release asset {REGISTRY_ASSET_NAME} has no download URL")

    published = await github.download_asset(download_url)
    if tmp_path is not None:
        target = Path(tmp_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(published)

    local = Path(local_path)
    if not local.exists():
        out.print(f"Source {REGISTRY_ASSET_NAME} does not exist.")
        return True

    return local.read_bytes() != published


def emit_diff_output(is_diff: bool, *, console: Console | None = None) -> str:
    """Print the workflow output line and mirror it into $GITHUB_OUTPUT when set."""
    value = "1" if is_diff else "0"
    line = f"::set-output name=is_diff::{value}"
    (console or stdout_console).print(line, markup=False)

    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with Path(output_file).open("a", encoding="utf-8") as handle:
            handle.write(f"is_diff={value}\n")
    return line


def _find_asset(assets: Any) -> dict[str, Any] | None:
    if not isinstance(assets, list):
        return None
    for asset in assets:
        if isinstance(asset, dict) and asset.get("name") == REGISTRY_ASSET_NAME:
            return asset
    return None
