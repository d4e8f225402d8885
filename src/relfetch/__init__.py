"""relfetch: resolve, download and verify GitHub release artifacts."""

from relfetch.download import (
    Artifact,
    Asset,
    ChecksumKind,
    GithubReleaseSource,
    OsBucket,
    OsType,
    Release,
    ReleaseIndex,
)

__all__ = [
    "Artifact",
    "Asset",
    "ChecksumKind",
    "GithubReleaseSource",
    "OsBucket",
    "OsType",
    "Release",
    "ReleaseIndex",
]
