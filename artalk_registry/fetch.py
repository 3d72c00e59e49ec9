"""Per-entry metadata lookups that degrade to None instead of raising."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from artalk_registry.console import error_console, fail_line
from artalk_registry.remote.client import FetchError, GitHubClient, NpmClient, PackageInfo


class MetadataFetcher:
    """Fetch npm and GitHub metadata for one entry at a time.

    Failures are printed and reported as None so that the caller can drop the
    entry and carry on with the rest of the batch.
    """

    def __init__(
        self,
        *,
        npm: NpmClient | None = None,
        github: GitHubClient | None = None,
        console: Console | None = None,
    ) -> None:
        self.npm = npm or NpmClient()
        self.github = github or GitHubClient()
        self.console = console or error_console

    async def package_info(self, package_name: str) -> PackageInfo | None:
        try:
            return await self.npm.package_info(package_name)
        except FetchError as exc:
            self.console.print(fail_line(package_name, "Failed to fetch NPM", exc))
            return None

    async def repo_info(self, owner_repo: str) -> dict[str, Any] | None:
        try:
            return await self.github.repo(owner_repo)
        except FetchError as exc:
            self.console.print(fail_line(owner_repo, "Failed to fetch GitHub repo", exc))
            return None
