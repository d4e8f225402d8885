"""
Operating System Matching

Release artifacts are published per coarse OS bucket, while host detection can
report a specific Linux distribution. This module narrows concrete OS
identifiers to the bucket used for artifact selection.
"""

import platform
import sys
from enum import Enum
from typing import Dict, Optional

from relfetch.constants import OS_RELEASE_PATHS
from relfetch.log_utils import logger


class OsType(Enum):
    """Concrete operating system identifiers a host or asset can report."""

    ALPINE = "alpine"
    AMAZON = "amazon"
    ANDROID = "android"
    ARCH = "arch"
    CENTOS = "centos"
    DEBIAN = "debian"
    FEDORA = "fedora"
    GENTOO = "gentoo"
    LINUX = "linux"
    MACOS = "macos"
    MANJARO = "manjaro"
    MINT = "mint"
    NIXOS = "nixos"
    OPENSUSE = "opensuse"
    ORACLE_LINUX = "ol"
    POP = "pop"
    REDHAT = "redhat"
    REDHAT_ENTERPRISE = "rhel"
    REDOX = "redox"
    SUSE = "suse"
    UBUNTU = "ubuntu"
    UNKNOWN = "unknown"
    WINDOWS = "windows"


class OsBucket(Enum):
    """Coarse platform categories that artifacts are published for."""

    ANDROID = "android"
    LINUX = "linux"
    MACOS = "macos"
    REDOX = "redox"
    UNKNOWN = "unknown"
    WINDOWS = "windows"


# Every OsType missing here is a Linux distribution.
_NON_LINUX_BUCKETS: Dict[OsType, OsBucket] = {
    OsType.ANDROID: OsBucket.ANDROID,
    OsType.MACOS: OsBucket.MACOS,
    OsType.REDOX: OsBucket.REDOX,
    OsType.UNKNOWN: OsBucket.UNKNOWN,
    OsType.WINDOWS: OsBucket.WINDOWS,
}

# Ordered: the first matching fragment decides, so "darwin" wins over "linux"
# in names such as "tool-x86_64-apple-darwin.tar.gz".
_ASSET_NAME_HINTS = (
    ("windows", OsType.WINDOWS),
    ("win64", OsType.WINDOWS),
    ("win32", OsType.WINDOWS),
    (".exe", OsType.WINDOWS),
    ("apple", OsType.MACOS),
    ("darwin", OsType.MACOS),
    ("macos", OsType.MACOS),
    ("osx", OsType.MACOS),
    ("android", OsType.ANDROID),
    ("redox", OsType.REDOX),
    ("linux", OsType.LINUX),
)


def compact(os_type: OsType) -> OsBucket:
    """Narrow a concrete OS identifier to its artifact bucket."""
    return _NON_LINUX_BUCKETS.get(os_type, OsBucket.LINUX)


def os_type_from_asset_name(name: str) -> OsType:
    """
    Infer the target OS of an uploaded file from its name.

    Returns OsType.UNKNOWN when no conventional OS fragment is present.
    """
    lower = name.lower()
    for fragment, os_type in _ASSET_NAME_HINTS:
        if fragment in lower:
            return os_type
    return OsType.UNKNOWN


def _read_os_release_id() -> Optional[str]:
    try:
        info = platform.freedesktop_os_release()
    except OSError:
        logger.debug("No os-release file found in %s", ", ".join(OS_RELEASE_PATHS))
        return None
    return info.get("ID")


def detect_host_os() -> OsType:
    """
    Identify the operating system of the current process.

    On Linux the `ID` field of os-release selects the distribution; unrecognised
    distributions are reported as plain OsType.LINUX.
    """
    system = platform.system().lower()
    if system == "windows":
        return OsType.WINDOWS
    if system == "darwin":
        return OsType.MACOS
    if system == "linux":
        if hasattr(sys, "getandroidapilevel"):
            return OsType.ANDROID
        distro_id = _read_os_release_id()
        if distro_id:
            try:
                return OsType(distro_id.lower())
            except ValueError:
                logger.debug("Unrecognised Linux distribution %r", distro_id)
        return OsType.LINUX
    if system == "redox":
        return OsType.REDOX

    logger.debug("Unrecognised host system %r", system)
    return OsType.UNKNOWN
