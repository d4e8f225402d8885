"""
relfetch Download Subsystem

Resolves the release artifact for a version and operating system, then
downloads and verifies it.

Core Components:
- interfaces: Immutable release, artifact and asset records
- checksum: Checksum sidecar classification and verification
- pairing: Pairing of release files with their sidecars
- platforms: OS identifiers and artifact buckets
- index: Release lookup by version and OS
- github_source: GitHub API access and artifact downloads
- files: File operations for streamed downloads
"""

from .checksum import ChecksumKind
from .github_source import GithubReleaseSource, create_release_from_github_data
from .index import ReleaseIndex
from .interfaces import Artifact, Asset, Release
from .pairing import pair_assets
from .platforms import OsBucket, OsType, compact, detect_host_os

__all__ = [
    # Records
    "Artifact",
    "Asset",
    "Release",
    "ChecksumKind",
    # Platforms
    "OsBucket",
    "OsType",
    "compact",
    "detect_host_os",
    # Resolution
    "pair_assets",
    "ReleaseIndex",
    # Source
    "GithubReleaseSource",
    "create_release_from_github_data",
]
