"""
GitHub Release Source

This module fetches the release list of a GitHub repository, turns it into a
ReleaseIndex, and downloads and verifies individual artifacts.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import requests  # type: ignore[import-untyped]

from relfetch.config import get_effective_github_token
from relfetch.constants import (
    DEFAULT_CONFIG,
    DEFAULT_REPO_API_URL,
    GITHUB_API_BASE,
    RELEASES_PATH,
)
from relfetch.exceptions import (
    ChecksumMismatchError,
    DeserializationError,
    HTTPError,
    NetworkError,
    RateLimitError,
)
from relfetch.log_utils import logger
from relfetch.utils import build_github_headers, raise_if_rate_limited

from . import checksum
from .files import remove_file, write_response_to_file
from .index import ReleaseIndex
from .interfaces import Artifact, Asset, Pathish, ProgressCallback, Release
from .pairing import pair_assets


def _parse_published_at(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        # GitHub uses a trailing "Z", which fromisoformat() only accepts from 3.11
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparsable release timestamp %r", value)
        return None


def create_asset_from_github_data(asset_data: Dict[str, Any]) -> Optional[Asset]:
    """
    Create an Asset from one entry of a GitHub release's `assets` list.

    Returns:
        Optional[Asset]: None when the name or download URL is missing.
    """
    name = asset_data.get("name")
    url = asset_data.get("browser_download_url")
    if not isinstance(name, str) or not name.strip():
        return None
    if not isinstance(url, str) or not url:
        return None
    return Asset(name=name, download_url=url)


def create_release_from_github_data(release_data: Dict[str, Any]) -> Release:
    """
    Create a Release from raw GitHub API release data.

    Assets are paired with their checksum sidecars and bucketed by target OS.
    Malformed asset entries are skipped with a warning.

    Raises:
        DeserializationError: If the record has no usable `tag_name` or `assets` list.
    """
    tag_name = release_data.get("tag_name")
    if not isinstance(tag_name, str) or not tag_name.strip():
        raise DeserializationError(
            "Release record has a missing or invalid tag_name",
            details=repr(tag_name),
        )

    assets_data = release_data.get("assets", [])
    if not isinstance(assets_data, list):
        raise DeserializationError(
            f"Release {tag_name} has an invalid assets field",
            details=type(assets_data).__name__,
        )

    assets: List[Asset] = []
    for asset_data in assets_data:
        asset = (
            create_asset_from_github_data(asset_data)
            if isinstance(asset_data, dict)
            else None
        )
        if asset is None:
            logger.warning("Skipping malformed asset for release %s", tag_name)
            continue
        assets.append(asset)

    return Release.from_artifacts(
        version=tag_name,
        artifacts=pair_assets(assets),
        released_at=_parse_published_at(release_data.get("published_at")),
        prerelease=bool(release_data.get("prerelease", False)),
    )


class GithubReleaseSource:
    """
    Client for one repository's GitHub releases.

    A single requests.Session is shared by every call made through the source
    and closed with close() or when leaving a `with` block.

    Usage:
        with GithubReleaseSource.for_repo("owner/repo") as source:
            index = source.list_releases()
            artifact = index.resolve_for_current_os("v1.2.3")
            if artifact is not None:
                source.download_artifact(artifact, "downloads/" + artifact.name)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_REPO_API_URL,
        session: Optional[requests.Session] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the release source.

        Parameters:
            base_url (str): Repository API URL, e.g. "https://api.github.com/repos/owner/repo".
            session (Optional[requests.Session]): Session to reuse; one is created when omitted.
            config (Optional[Dict[str, Any]]): Settings as returned by load_config().
        """
        self.base_url = base_url.rstrip("/")
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.timeout = self.config["REQUEST_TIMEOUT"]
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            build_github_headers(get_effective_github_token(self.config))
        )

    @classmethod
    def for_repo(cls, repo: str, **kwargs: Any) -> "GithubReleaseSource":
        """Build a source from an `owner/repo` slug."""
        return cls(f"{GITHUB_API_BASE}/{repo.strip('/')}", **kwargs)

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], **kwargs: Any
    ) -> "GithubReleaseSource":
        base_url = config.get("REPO_API_URL", DEFAULT_REPO_API_URL)
        return cls(base_url, config=config, **kwargs)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "GithubReleaseSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        """
        Issue one GET request, mapping transport and HTTP failures onto relfetch errors.

        Rate limiting is checked before the status, since GitHub reports an
        exhausted limit with a 403.
        """
        logger.debug("Making GitHub request: %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError("Request failed", url=url, details=str(e)) from e

        try:
            raise_if_rate_limited(response, url)
        except RateLimitError:
            response.close()
            raise

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            response.close()
            raise HTTPError(
                f"HTTP {response.status_code} from server",
                status_code=response.status_code,
                url=url,
                details=str(e),
            ) from e
        return response

    def list_releases(self) -> ReleaseIndex:
        """
        Fetch every release of the repository.

        Returns:
            ReleaseIndex: Releases in API order (newest first).

        Raises:
            RateLimitError: If the API reports no remaining requests.
            NetworkError: On transport failures or HTTP error statuses.
            DeserializationError: If the body is not a JSON list of release records.
        """
        url = f"{self.base_url}/{RELEASES_PATH}"
        response = self._get(url)
        try:
            releases_data = response.json()
        except ValueError as e:
            raise DeserializationError(
                "Could not deserialize releases response", endpoint=url, details=str(e)
            ) from e

        if not isinstance(releases_data, list):
            raise DeserializationError(
                "Expected a list of releases",
                endpoint=url,
                details=type(releases_data).__name__,
            )

        releases: List[Release] = []
        for release_data in releases_data:
            if not isinstance(release_data, dict):
                raise DeserializationError(
                    "Malformed release entry",
                    endpoint=url,
                    details=type(release_data).__name__,
                )
            releases.append(create_release_from_github_data(release_data))

        logger.debug("Fetched %d releases from %s", len(releases), url)
        return ReleaseIndex(releases)

    def fetch_checksum(self, sidecar: Asset) -> bytes:
        """
        Download a checksum sidecar and decode its hex content.

        Raises:
            InvalidChecksumError: If the sidecar does not hold a hex digest.
        """
        response = self._get(sidecar.download_url)
        return checksum.decode_checksum_text(response.text)

    def download_artifact(
        self,
        artifact: Artifact,
        destination: Pathish,
        progress: Optional[ProgressCallback] = None,
    ) -> Pathish:
        """
        Download an artifact and verify it against its checksum sidecar, if any.

        Parameters:
            artifact (Artifact): Artifact resolved from a ReleaseIndex.
            destination (Pathish): Path to write the file to.
            progress (Optional[ProgressCallback]): Optional transfer progress callback.

        Returns:
            Pathish: `destination`, once the file is written and verified.

        Raises:
            ChecksumMismatchError: If the downloaded bytes do not match the sidecar;
                the downloaded file is removed first.
            InvalidChecksumError: If the sidecar content is not valid hex.
            NetworkError: On transport failures or HTTP error statuses.
            FileSystemError: If the file cannot be written, read, or removed.
        """
        logger.info("Downloading %s", artifact.name)
        response = self._get(artifact.download_url, stream=True)
        try:
            write_response_to_file(response, destination, progress)
        except requests.RequestException as e:
            raise NetworkError(
                "Download interrupted", url=artifact.download_url, details=str(e)
            ) from e
        finally:
            response.close()

        if artifact.checksum is None:
            logger.debug(
                "No checksum published for %s; skipping verification", artifact.name
            )
            return destination

        kind, sidecar = artifact.checksum
        expected = self.fetch_checksum(sidecar)
        if not checksum.verify(kind, expected, destination):
            remove_file(destination)
            raise ChecksumMismatchError(
                f"Checksum verification failed for {artifact.name}",
                path=str(destination),
                algorithm=kind.algorithm,
                url=artifact.download_url,
            )

        logger.info("Verified %s (%s)", artifact.name, kind.algorithm)
        return destination
