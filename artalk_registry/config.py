"""Environment-driven paths and endpoints for registry builds."""

from __future__ import annotations

import os
from pathlib import Path

_ROOT_ENV = "ARTALK_REGISTRY_ROOT"
_TOKEN_ENV = "GITHUB_TOKEN"

_PLUGINS_FILENAME = "plugins.yaml"
_THEMES_FILENAME = "themes.yaml"
_DIST_DIRNAME = "dist"
_TMP_DIRNAME = ".tmp"
_REGISTRY_FILENAME = "registry.json"

_DEFAULT_NPM_REGISTRY = "https://registry.npmjs.org"
_DEFAULT_CDN_BASE = "https://cdn.jsdelivr.net/npm"
_DEFAULT_GITHUB_API = "https://api.github.com"
_DEFAULT_RELEASE_REPO = "ArtalkJS/Community"

GITHUB_API_VERSION = "2022-11-28"
VERIFIED_SCOPE = "@artalk/"
CLIENT_PACKAGE = "artalk"
OPTIONS_SCHEMA_FILENAME = "artalk-plugin-options.schema.json"
REGISTRY_ASSET_NAME = _REGISTRY_FILENAME


def project_root(root: str | Path | None = None) -> Path:
    if root is not None:
        return Path(root).expanduser().resolve()
    override = os.environ.get(_ROOT_ENV)
    if override:
        return Path(override).expanduser().resolve()
    return Path.cwd().resolve()


def plugins_file(root: str | Path | None = None) -> Path:
    return project_root(root) / _PLUGINS_FILENAME


def themes_file(root: str | Path | None = None) -> Path:
    return project_root(root) / _THEMES_FILENAME


def registry_dist(root: str | Path | None = None) -> Path:
    return project_root(root) / _DIST_DIRNAME / _REGISTRY_FILENAME


def tmp_registry(root: str | Path | None = None) -> Path:
    """Where the diff checker stores the downloaded release artifact."""
    return project_root(root) / _TMP_DIRNAME / _REGISTRY_FILENAME


def github_token() -> str | None:
    value = os.environ.get(_TOKEN_ENV)
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def npm_registry_url() -> str:
    return _env_url("ARTALK_NPM_REGISTRY", _DEFAULT_NPM_REGISTRY)


def cdn_base_url() -> str:
    return _env_url("ARTALK_CDN_BASE", _DEFAULT_CDN_BASE)


def github_api_url() -> str:
    return _env_url("ARTALK_GITHUB_API", _DEFAULT_GITHUB_API)


def release_repo() -> str:
    value = os.environ.get("ARTALK_RELEASE_REPO", "").strip()
    return value or _DEFAULT_RELEASE_REPO


def _env_url(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip()
    return (value or default).rstrip("/")
