"""
Checksum Sidecar Handling

Classifies uploaded file names as checksum sidecars (`.sha1` / `.sha256`) and
verifies downloaded files against the digest published in a sidecar.
"""

import hashlib
import hmac
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from relfetch.constants import DEFAULT_CHUNK_SIZE, SHA1_SUFFIX, SHA256_SUFFIX
from relfetch.exceptions import FileSystemError, InvalidChecksumError
from relfetch.log_utils import logger


class ChecksumKind(Enum):
    """Digest algorithms that can be published as a sidecar file."""

    SHA1 = "sha1"
    SHA256 = "sha256"

    @property
    def suffix(self) -> str:
        """File name suffix identifying a sidecar of this kind."""
        return SHA1_SUFFIX if self is ChecksumKind.SHA1 else SHA256_SUFFIX

    @property
    def algorithm(self) -> str:
        """Algorithm name understood by hashlib.new()."""
        return self.value

    @property
    def priority(self) -> int:
        """Preference when several sidecars describe the same file; higher wins."""
        return 1 if self is ChecksumKind.SHA256 else 0


def classify(filename: str) -> Optional[ChecksumKind]:
    """
    Return the checksum kind of a sidecar file name, or None for any other file.

    >>> classify("tool-linux.tar.gz.sha256")
    <ChecksumKind.SHA256: 'sha256'>
    """
    if filename.endswith(SHA256_SUFFIX):
        return ChecksumKind.SHA256
    if filename.endswith(SHA1_SUFFIX):
        return ChecksumKind.SHA1
    return None


def strip_suffix(filename: str, kind: ChecksumKind) -> str:
    """
    Remove the sidecar suffix for `kind`, yielding the name of the described file.

    Raises:
        ValueError: If `filename` does not end with the suffix of `kind`.
    """
    if not filename.endswith(kind.suffix):
        raise ValueError(f"{filename!r} is not a {kind.algorithm} sidecar")
    return filename[: -len(kind.suffix)]


def decode_checksum_text(text: str) -> bytes:
    """
    Decode sidecar text content into raw digest bytes.

    Accepts a bare hex digest as well as the `<hex>  <filename>` layout written
    by sha256sum and friends; only the first whitespace-separated token is used.

    Raises:
        InvalidChecksumError: If the content is empty or not valid hex.
    """
    tokens = text.split()
    if not tokens:
        raise InvalidChecksumError("Checksum file is empty", field="checksum")

    digest_hex = tokens[0]
    try:
        return bytes.fromhex(digest_hex)
    except ValueError as e:
        raise InvalidChecksumError(
            "Checksum is not valid hex",
            field="checksum",
            value=digest_hex,
            details=str(e),
        ) from e


def compute_digest(kind: ChecksumKind, file_path: Union[str, Path]) -> bytes:
    """
    Stream a file through the digest algorithm named by `kind`.

    Raises:
        FileSystemError: If the file cannot be opened or read.
    """
    digest = hashlib.new(kind.algorithm)
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(DEFAULT_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        raise FileSystemError(
            "Could not read file for checksum verification",
            path=str(file_path),
            details=str(e),
        ) from e
    return digest.digest()


def verify(
    kind: ChecksumKind, expected_digest: bytes, file_path: Union[str, Path]
) -> bool:
    """
    Check a file's contents against an expected raw digest.

    Parameters:
        kind (ChecksumKind): Algorithm to hash the file with.
        expected_digest (bytes): Raw digest bytes, as returned by decode_checksum_text().
        file_path (Union[str, Path]): File to verify.

    Returns:
        bool: True if the computed digest equals `expected_digest` byte-for-byte.

    Raises:
        FileSystemError: If the file cannot be read.
    """
    actual = compute_digest(kind, file_path)
    matched = hmac.compare_digest(actual, expected_digest)
    if matched:
        logger.debug("%s verified for %s", kind.algorithm, Path(file_path).name)
    else:
        logger.warning(
            "%s mismatch for %s: expected %s, got %s",
            kind.algorithm,
            Path(file_path).name,
            expected_digest.hex(),
            actual.hex(),
        )
    return matched
