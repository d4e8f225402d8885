"""
File Operations for relfetch Downloads

Writes streamed HTTP bodies to disk through a temporary file so a failed
transfer never leaves a truncated file at the destination.
"""

import os
import time
from pathlib import Path
from typing import Optional

import requests

from relfetch.constants import DEFAULT_CHUNK_SIZE
from relfetch.exceptions import FileSystemError
from relfetch.log_utils import logger

from .interfaces import Pathish, ProgressCallback


def _content_length(response: requests.Response) -> Optional[int]:
    raw = response.headers.get("Content-Length")
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not remove %s: %s", path, e)


def write_response_to_file(
    response: requests.Response,
    destination: Pathish,
    progress: Optional[ProgressCallback] = None,
) -> int:
    """
    Stream a response body to `destination`, replacing any existing file.

    Parameters:
        response (requests.Response): Response opened with `stream=True`.
        destination (Pathish): Final path of the file; parent directories are created.
        progress (Optional[ProgressCallback]): Receives (bytes written, total or None) after each chunk.

    Returns:
        int: Number of bytes written.

    Raises:
        FileSystemError: If the file cannot be written or moved into place.
        requests.RequestException: If the transfer breaks off mid-stream.
    """
    dest = Path(destination)
    stamp = f"{os.getpid()}.{int(time.time() * 1000)}"
    temp_path = dest.with_name(f"{dest.name}.tmp.{stamp}")
    total = _content_length(response)
    written = 0

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                written += len(chunk)
                if progress is not None:
                    progress(written, total)
        os.replace(temp_path, dest)
    except OSError as e:
        _remove_quietly(temp_path)
        raise FileSystemError(
            "Could not write downloaded file", path=str(dest), details=str(e)
        ) from e
    except BaseException:
        _remove_quietly(temp_path)
        raise

    if written >= 1024 * 1024:
        logger.info("Downloaded: %s (%.1f MB)", dest.name, written / (1024 * 1024))
    else:
        logger.info("Downloaded: %s (%d bytes)", dest.name, written)
    return written


def remove_file(path: Pathish) -> None:
    """Delete a file if it exists, raising FileSystemError on failure."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        raise FileSystemError(
            "Could not remove file", path=str(path), details=str(e)
        ) from e
