from artalk_registry.remote.client import (
    CdnClient,
    FetchError,
    GitHubClient,
    NpmClient,
    PackageInfo,
    PackageManifest,
)

__all__ = [
    "CdnClient",
    "FetchError",
    "GitHubClient",
    "NpmClient",
    "PackageInfo",
    "PackageManifest",
]
