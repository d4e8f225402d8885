"""
Release Index

Holds the releases returned by one fetch and answers lookups by exact version
string and host operating system.
"""

from typing import Iterable, Iterator, List, Optional

from semver import Version

from relfetch.exceptions import VersionNotFoundError
from relfetch.log_utils import logger

from .interfaces import Artifact, Release, parse_semantic_version
from .platforms import OsType, detect_host_os


class ReleaseIndex:
    """
    Read-only collection of releases in the order the API returned them.

    The GitHub API lists releases newest first; the index never re-sorts.
    """

    def __init__(self, releases: Iterable[Release]):
        self._releases: List[Release] = list(releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self._releases)

    def __len__(self) -> int:
        return len(self._releases)

    def all_releases(self) -> Iterator[Release]:
        return iter(self._releases)

    def find_by_version(self, version: str) -> Release:
        """
        Return the release whose tag equals `version` exactly.

        No normalization is applied: "v1.2.3" does not match a release tagged "1.2.3".

        Raises:
            VersionNotFoundError: If no release carries that tag.
        """
        for release in self._releases:
            if release.version == version:
                return release
        raise VersionNotFoundError(version)

    def resolve_artifact(self, version: str, os_type: OsType) -> Optional[Artifact]:
        """
        Return the artifact of release `version` built for the bucket of `os_type`.

        Returns:
            Optional[Artifact]: None when the release exists but ships nothing for that OS.

        Raises:
            VersionNotFoundError: If no release carries that tag.
        """
        release = self.find_by_version(version)
        artifact = release.get_artifact_for_os(os_type)
        if artifact is None:
            logger.debug("Release %s has no artifact for %s", version, os_type.value)
        return artifact

    def resolve_for_current_os(self, version: str) -> Optional[Artifact]:
        """resolve_artifact() for the operating system this process runs on."""
        return self.resolve_artifact(version, detect_host_os())

    @staticmethod
    def parsed_semantic_version(release: Release) -> Version:
        """
        Parse a release's tag as a version, ignoring its first character.

        Raises:
            VersionError: If the tag is not a valid version once the marker is removed.
        """
        return parse_semantic_version(release.version)
