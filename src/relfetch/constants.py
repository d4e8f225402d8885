"""
Constants and configuration values for relfetch.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the package.
"""

# GitHub API URLs
GITHUB_API_BASE = "https://api.github.com/repos"
DEFAULT_REPO = "input-output-hk/jormungandr"
DEFAULT_REPO_API_URL = f"{GITHUB_API_BASE}/{DEFAULT_REPO}"
RELEASES_PATH = "releases"

# GitHub API headers
GITHUB_ACCEPT_HEADER = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"

# Network timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

# Checksum sidecar suffixes
SHA1_SUFFIX = ".sha1"
SHA256_SUFFIX = ".sha256"

# Logging configuration
LOGGER_NAME = "relfetch"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_NAME = "relfetch.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Configuration file names
APP_NAME = "relfetch"
CONFIG_FILE_NAME = "relfetch.yaml"

# Environment variable names
LOG_LEVEL_ENV_VAR = "RELFETCH_LOG_LEVEL"
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"

# Default configuration values
DEFAULT_CONFIG = {
    "REPO_API_URL": DEFAULT_REPO_API_URL,
    "GITHUB_TOKEN": None,
    "ALLOW_ENV_TOKEN": True,
    "REQUEST_TIMEOUT": DEFAULT_REQUEST_TIMEOUT,
    "LOG_LEVEL": "INFO",
    "LOG_DIR": None,
}

# Host OS detection
OS_RELEASE_PATHS = ("/etc/os-release", "/usr/lib/os-release")
