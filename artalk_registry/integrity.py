"""Subresource integrity digests and the optional options-schema probe."""

from __future__ import annotations

import base64
import hashlib

from rich.console import Console

from artalk_registry.console import error_console, fail_line
from artalk_registry.remote.client import CdnClient, FetchError

DEFAULT_ALGORITHM = "sha512"
_SUPPORTED_ALGORITHMS = {"sha256", "sha384", "sha512"}


def generate_sri(content: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return `<algorithm>-<base64 digest>` for the given bytes."""
    name = algorithm.strip().lower()
    if name not in _SUPPORTED_ALGORITHMS:
        raise ValueError(f"unsupported SRI algorithm '{algorithm}'. Expected sha256, sha384, or sha512.")
    digest = hashlib.new(name, content).digest()
    return f"{name}-{base64.b64encode(digest).decode('ascii')}"


class IntegrityResolver:
    def __init__(self, *, cdn: CdnClient | None = None, console: Console | None = None) -> None:
        self.cdn = cdn or CdnClient()
        self.console = console or error_console

    async def sri_from_url(self, url: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
        """Download `url` and hash it; an empty string means the file is unusable."""
        try:
            content = await self.cdn.download(url)
            return generate_sri(content, algorithm)
        except (FetchError, ValueError) as exc:
            self.console.print(fail_line(url, "Failed to generate SRI", exc))
            return ""

    async def resolve_options_schema(self, url: str) -> str:
        try:
            await self.cdn.head(url)
        except FetchError:
            return ""
        return url
