"""HTTP clients for the npm registry, the GitHub API and the package CDN."""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from artalk_registry.config import (
    GITHUB_API_VERSION,
    cdn_base_url,
    github_api_url,
    github_token,
    npm_registry_url,
)


class FetchError(RuntimeError):
    """Raised when a remote call fails or returns something unusable."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PackageManifest(BaseModel):
    """The subset of a published package.json the build relies on."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    main: str | None = None
    peer_dependencies: dict[str, Any] = Field(default_factory=dict, alias="peerDependencies")

    @field_validator("peer_dependencies", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class PackageInfo(BaseModel):
    """npm registry document for one package."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    dist_tags: dict[str, str] = Field(default_factory=dict, alias="dist-tags")
    versions: dict[str, dict[str, Any]] = Field(default_factory=dict)
    time: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _require_latest(self) -> "PackageInfo":
        if not self.dist_tags.get("latest"):
            raise ValueError("package has no 'latest' dist-tag")
        return self

    @property
    def latest(self) -> str:
        return self.dist_tags["latest"]

    def manifest(self, version: str) -> PackageManifest | None:
        raw = self.versions.get(version)
        if not isinstance(raw, dict):
            return None
        try:
            return PackageManifest.model_validate(raw)
        except ValidationError:
            return None


class _ApiClient:
    """Shared request plumbing; one short-lived AsyncClient per call."""

    def __init__(self, *, base_url: str, timeout_seconds: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _default_headers(self) -> dict[str, str]:
        return {}

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"response is not valid JSON for {method} {url}") from exc

    async def _request_bytes(self, method: str, url: str, **kwargs: Any) -> bytes:
        response = await self._request(method, url, **kwargs)
        return response.content

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        request_headers = dict(headers) if headers is not None else self._default_headers()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                follow_redirects=True,
            ) as client:
                response = await client.request(method, url, headers=request_headers, **kwargs)
        except httpx.RequestError as exc:
            raise FetchError(f"unable to reach {self.base_url}: {exc}") from exc

        if response.status_code >= 400:
            raise FetchError(self._format_http_error(method, url, response), status_code=response.status_code)
        return response

    def _format_http_error(self, method: str, url: str, response: httpx.Response) -> str:
        detail: str | None = None
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            raw_detail = payload.get("message") or payload.get("error")
            if isinstance(raw_detail, str):
                detail = raw_detail
            elif raw_detail is not None:
                detail = json.dumps(raw_detail)
        if not detail:
            detail = response.text.strip()[:200] or "no response body"

        reason = response.reason_phrase or "Error"
        return f"{method} {url} failed ({response.status_code} {reason}): {detail}"


class NpmClient(_ApiClient):
    def __init__(self, *, base_url: str | None = None, timeout_seconds: float = 30.0) -> None:
        super().__init__(base_url=base_url or npm_registry_url(), timeout_seconds=timeout_seconds)

    async def package_info(self, package_name: str) -> PackageInfo:
        name = package_name.strip()
        if not name:
            raise FetchError("package name cannot be empty")

        payload = await self._request_json("GET", f"/{name}")
        try:
            return PackageInfo.model_validate(payload)
        except ValidationError as exc:
            raise FetchError(f"unexpected npm metadata for {name}: {exc}") from exc


class GitHubClient(_ApiClient):
    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(base_url=base_url or github_api_url(), timeout_seconds=timeout_seconds)
        self.token = token if token is not None else github_token()

    def _token_headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _default_headers(self) -> dict[str, str]:
        return {
            **self._token_headers(),
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def repo(self, owner_repo: str) -> dict[str, Any]:
        payload = await self._request_json("GET", f"/repos/{_repo_path(owner_repo)}")
        if not isinstance(payload, dict):
            raise FetchError(f"unexpected repository payload for {owner_repo}")
        return payload

    async def latest_release(self, owner_repo: str) -> dict[str, Any]:
        payload = await self._request_json("GET", f"/repos/{_repo_path(owner_repo)}/releases/latest")
        if not isinstance(payload, dict):
            raise FetchError(f"unexpected release payload for {owner_repo}")
        return payload

    async def download_asset(self, url: str) -> bytes:
        return await self._request_bytes("GET", url, headers=self._token_headers())


class CdnClient(_ApiClient):
    def __init__(self, *, base_url: str | None = None, timeout_seconds: float = 30.0) -> None:
        super().__init__(base_url=base_url or cdn_base_url(), timeout_seconds=timeout_seconds)

    def package_url(self, package_name: str, version: str, file_path: str = "") -> str:
        base = f"{self.base_url}/{package_name}@{version}"
        return f"{base}/{file_path}" if file_path else base

    async def download(self, url: str) -> bytes:
        return await self._request_bytes("GET", url)

    async def head(self, url: str) -> dict[str, str]:
        response = await self._request("HEAD", url)
        return dict(response.headers)


def _repo_path(owner_repo: str) -> str:
    cleaned = owner_repo.strip().strip("/")
    owner, _, name = cleaned.partition("/")
    if not owner or not name:
        raise FetchError(f"repository must look like 'owner/name' (got {owner_repo!r})")
    return cleaned
