"""
Core Data Structures for relfetch Release Resolution

This module defines the immutable records that flow from a single releases
fetch through pairing and indexing to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple, Union

from semver import Version

from relfetch.exceptions import VersionError

from .checksum import ChecksumKind
from .platforms import OsBucket, OsType, compact, os_type_from_asset_name

Pathish = Union[str, Path]

ProgressCallback = Callable[[int, Optional[int]], None]
"""Called with (bytes written so far, total bytes or None when unknown)."""


@dataclass(frozen=True)
class Asset:
    """Represents one uploaded file of a release."""

    name: str
    """The filename of the asset"""

    download_url: str
    """Direct URL to download the asset"""


@dataclass(frozen=True)
class Artifact:
    """A downloadable release file together with its optional checksum sidecar."""

    asset: Asset
    checksum: Optional[Tuple[ChecksumKind, Asset]] = None

    def __post_init__(self) -> None:
        if self.checksum is not None:
            kind, sidecar = self.checksum
            if sidecar.name != self.asset.name + kind.suffix:
                raise ValueError(
                    f"Sidecar {sidecar.name!r} does not describe {self.asset.name!r}"
                )

    @property
    def name(self) -> str:
        return self.asset.name

    @property
    def download_url(self) -> str:
        return self.asset.download_url

    @property
    def os_type(self) -> OsType:
        return os_type_from_asset_name(self.asset.name)

    @property
    def checksum_kind(self) -> Optional[ChecksumKind]:
        return self.checksum[0] if self.checksum is not None else None


def parse_semantic_version(version: str) -> Version:
    """
    Parse a release tag after dropping its first character (the tag marker, e.g. 'v').

    Raises:
        VersionError: If the remainder is not a valid SemVer 2.0.0 version.
    """
    remainder = version[1:]
    try:
        return Version.parse(remainder)
    except ValueError as e:
        raise VersionError(
            f"Invalid release version: {version}",
            field="version",
            value=version,
        ) from e


@dataclass(frozen=True)
class Release:
    """Represents one tagged release and its artifacts per OS bucket."""

    version: str
    """The exact release tag (e.g., 'v0.8.0'), leading marker included"""

    released_at: Optional[datetime] = None
    """When the release was published"""

    prerelease: bool = False
    """Whether this is a prerelease version"""

    releases_per_os: Mapping[OsBucket, Artifact] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    """At most one artifact per OS bucket"""

    @classmethod
    def from_artifacts(
        cls,
        version: str,
        artifacts: List[Artifact],
        released_at: Optional[datetime] = None,
        prerelease: bool = False,
    ) -> "Release":
        """Build a release, bucketing artifacts by OS; later artifacts replace earlier ones."""
        per_os = {}
        for artifact in artifacts:
            per_os[compact(artifact.os_type)] = artifact
        return cls(
            version=version,
            released_at=released_at,
            prerelease=prerelease,
            releases_per_os=MappingProxyType(per_os),
        )

    def get_artifact_for_os(self, os_type: OsType) -> Optional[Artifact]:
        """Return the artifact for the bucket `os_type` falls into, if any."""
        return self.releases_per_os.get(compact(os_type))

    def artifacts(self) -> List[Artifact]:
        return list(self.releases_per_os.values())

    def semantic_version(self) -> Version:
        return parse_semantic_version(self.version)
