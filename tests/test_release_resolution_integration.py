"""
End-to-end resolution scenario: fetch releases, resolve per host OS, download and verify.

Network access is simulated by routing the shared session's GET calls through
an in-memory table of URLs.
"""

import hashlib

import pytest

from relfetch.download.github_source import GithubReleaseSource
from relfetch.download.platforms import OsType
from relfetch.exceptions import ChecksumMismatchError, VersionNotFoundError

pytestmark = pytest.mark.integration

API_URL = "https://api.github.com/repos/owner/tool"
DL = "https://github.com/owner/tool/releases/download/v1.2.3"

LINUX_BYTES = b"\x1f\x8b linux build " * 64
MACOS_BYTES = b"\x1f\x8b macos build " * 64


@pytest.fixture
def routes(make_response):
    releases = [
        {
            "tag_name": "v1.2.3",
            "prerelease": False,
            "published_at": "2024-05-01T10:00:00Z",
            "assets": [
                {"name": "tool-linux.tar.gz", "browser_download_url": f"{DL}/tool-linux.tar.gz"},
                {
                    "name": "tool-linux.tar.gz.sha256",
                    "browser_download_url": f"{DL}/tool-linux.tar.gz.sha256",
                },
                {"name": "tool-macos.tar.gz", "browser_download_url": f"{DL}/tool-macos.tar.gz"},
            ],
        },
        {
            "tag_name": "1.2.3",
            "prerelease": True,
            "published_at": "2024-04-01T10:00:00Z",
            "assets": [],
        },
    ]
    table = {
        f"{API_URL}/releases": lambda: make_response(
            json_data=releases, headers={"X-RateLimit-Remaining": "42"}
        ),
        f"{DL}/tool-linux.tar.gz": lambda: make_response(body=LINUX_BYTES),
        f"{DL}/tool-linux.tar.gz.sha256": lambda: make_response(
            body=f"{hashlib.sha256(LINUX_BYTES).hexdigest()}  tool-linux.tar.gz\n"
        ),
        f"{DL}/tool-macos.tar.gz": lambda: make_response(body=MACOS_BYTES),
    }
    return table


@pytest.fixture
def source(mocker, routes):
    src = GithubReleaseSource(API_URL)
    get = mocker.patch.object(src.session, "get")
    get.side_effect = lambda url, **_kwargs: routes[url]()
    yield src
    src.close()


def test_linux_host_downloads_and_verifies(source, tmp_path):
    index = source.list_releases()
    artifact = index.resolve_artifact("v1.2.3", OsType.UBUNTU)

    dest = source.download_artifact(artifact, tmp_path / artifact.name)

    assert dest.read_bytes() == LINUX_BYTES
    requested = [call.args[0] for call in source.session.get.call_args_list]
    assert requested[-1] == f"{DL}/tool-linux.tar.gz.sha256"


def test_macos_host_downloads_without_verification(source, tmp_path):
    index = source.list_releases()
    artifact = index.resolve_artifact("v1.2.3", OsType.MACOS)

    assert artifact.checksum is None
    source.download_artifact(artifact, tmp_path / artifact.name)

    assert (tmp_path / "tool-macos.tar.gz").read_bytes() == MACOS_BYTES
    requested = [call.args[0] for call in source.session.get.call_args_list]
    assert not any(url.endswith(".sha256") for url in requested)


def test_corrupted_download_fails_verification(source, routes, make_response, tmp_path):
    corrupted = bytearray(LINUX_BYTES)
    corrupted[10] ^= 0xFF
    routes[f"{DL}/tool-linux.tar.gz"] = lambda: make_response(body=bytes(corrupted))

    artifact = source.list_releases().resolve_artifact("v1.2.3", OsType.LINUX)

    with pytest.raises(ChecksumMismatchError):
        source.download_artifact(artifact, tmp_path / artifact.name)
    assert not (tmp_path / artifact.name).exists()


def test_windows_host_has_no_build(source):
    index = source.list_releases()

    assert index.resolve_artifact("v1.2.3", OsType.WINDOWS) is None


def test_version_lookup_is_exact(source):
    index = source.list_releases()

    assert index.find_by_version("1.2.3").prerelease is True
    with pytest.raises(VersionNotFoundError):
        index.find_by_version("v1.2.4")
