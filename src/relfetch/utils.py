# src/relfetch/utils.py
import importlib.metadata
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import requests

from relfetch.constants import (
    GITHUB_ACCEPT_HEADER,
    GITHUB_API_VERSION,
    RATE_LIMIT_REMAINING_HEADER,
    RATE_LIMIT_RESET_HEADER,
)
from relfetch.exceptions import RateLimitError
from relfetch.log_utils import logger

# Cache for the User-Agent string to avoid repeated metadata lookups
_USER_AGENT_CACHE: Optional[str] = None


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `relfetch/{version}`, where `{version}` is the installed package version or `unknown` if the version cannot be determined.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        try:
            app_version = importlib.metadata.version("relfetch")
        except importlib.metadata.PackageNotFoundError:
            app_version = "unknown"

        _USER_AGENT_CACHE = f"relfetch/{app_version}"

    return _USER_AGENT_CACHE


def build_github_headers(token: Optional[str] = None) -> Dict[str, str]:
    """
    Build the fixed identifying headers sent with every GitHub API request.

    Parameters:
        token (Optional[str]): GitHub token; adds an Authorization header when given.
    """
    headers = {
        "Accept": GITHUB_ACCEPT_HEADER,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": get_user_agent(),
    }
    if token:
        headers["Authorization"] = f"token {token}"
        logger.debug("Using GitHub token for API authentication")
    else:
        logger.debug("No GitHub token available - using unauthenticated API requests")
    return headers


def parse_rate_limit_header(header_value: Any) -> Optional[int]:
    """
    Parse an HTTP rate-limit header value into an integer remaining count.

    Accepts numeric strings, integers, or floats and returns their integer representation.
    Non-numeric or otherwise unparsable values return `None`.
    """
    if isinstance(header_value, bool):
        return None
    if isinstance(header_value, str):
        stripped = header_value.strip()
        return int(stripped) if stripped.isdigit() else None
    if isinstance(header_value, (int, float)):
        return int(header_value)
    return None


def _format_reset_time(reset_value: Optional[int]) -> str:
    if reset_value is None:
        return "unknown"
    try:
        return datetime.fromtimestamp(reset_value, timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (OverflowError, OSError, ValueError):
        return "unknown"


def raise_if_rate_limited(response: requests.Response, url: str) -> None:
    """
    Raise RateLimitError when the response reports zero remaining API requests.

    Only an explicit `X-RateLimit-Remaining: 0` counts; a missing or unparsable
    header is not treated as throttling.
    """
    headers: Mapping[str, Any] = getattr(response, "headers", None) or {}
    remaining = parse_rate_limit_header(headers.get(RATE_LIMIT_REMAINING_HEADER))
    if remaining is None:
        logger.debug("No rate limit information available")
        return

    logger.debug("GitHub API rate-limit remaining: %s", remaining)
    if remaining != 0:
        return

    reset_time = parse_rate_limit_header(headers.get(RATE_LIMIT_RESET_HEADER))
    message = (
        f"GitHub API rate limit exceeded. Resets at {_format_reset_time(reset_time)}. "
        f"Set GITHUB_TOKEN environment variable for higher rate limits."
    )
    logger.error(message)
    raise RateLimitError(
        message,
        reset_time=reset_time,
        status_code=getattr(response, "status_code", None),
        url=url,
    )
