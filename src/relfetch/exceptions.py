"""
Error kinds raised by relfetch.

Every failure of release listing, resolution, download, verification and
configuration loading is reported as a subclass of RelfetchError.
"""


class RelfetchError(Exception):
    """Root of the relfetch error hierarchy; carries a message and optional details."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RelfetchError):
    """The relfetch YAML configuration could not be used."""


class ConfigFileError(ConfigurationError):
    """The configuration file is missing, unreadable, or not a YAML mapping."""


class ConfigValidationError(ConfigurationError):
    """A configuration key holds a value of the wrong type or shape."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Download Errors
# =============================================================================


class DownloadError(RelfetchError):
    """
    Base exception for download-related errors.

    Attributes:
        url: The URL that was being downloaded when the error occurred.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class NetworkError(DownloadError):
    """
    A request to GitHub or a download host failed.

    Raised for transport failures reported by requests and, through HTTPError,
    for error statuses. Interrupted artifact streams surface here as well.
    """


class HTTPError(NetworkError):
    """
    Exception raised when the server answers with an HTTP error status.

    Attributes:
        status_code: The HTTP status code returned by the server.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, url, details)
        self.status_code = status_code


class RateLimitError(HTTPError):
    """
    Exception raised when the GitHub API signals that the rate limit is exhausted.

    Attributes:
        reset_time: When the rate limit will reset (Unix timestamp), if known.
    """

    def __init__(
        self,
        message: str = "GitHub API rate limit exceeded",
        reset_time: int | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=status_code,
            url=url,
            details=f"Resets at: {reset_time}" if reset_time is not None else None,
        )
        self.reset_time = reset_time


class ChecksumMismatchError(DownloadError):
    """
    Exception raised when downloaded bytes do not match the published checksum.

    Attributes:
        path: Path of the file that failed verification.
        algorithm: Name of the digest algorithm used for verification.
    """

    def __init__(
        self,
        message: str = "Checksum verification failed",
        path: str | None = None,
        algorithm: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, url, details=algorithm)
        self.path = path
        self.algorithm = algorithm


# =============================================================================
# File System Errors
# =============================================================================


class FileSystemError(RelfetchError):
    """An artifact could not be written, hashed, or removed on disk."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(RelfetchError):
    """
    Exception raised when validation of external data fails.

    This includes:
    - Invalid version strings
    - Invalid checksum encodings
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


class VersionError(ValidationError):
    """Exception raised when a release version string is not a valid version."""

    pass


class InvalidChecksumError(ValidationError):
    """Exception raised when checksum sidecar content is not valid hex."""

    pass


# =============================================================================
# API Errors
# =============================================================================


class APIError(RelfetchError):
    """
    Exception raised for API-related errors.

    This includes:
    - Invalid API responses
    - Resource not found errors
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class DeserializationError(APIError):
    """Exception raised when an API response body cannot be decoded."""

    pass


class ResourceNotFoundError(APIError):
    """Exception raised when an API resource is not found."""

    pass


class VersionNotFoundError(ResourceNotFoundError):
    """
    Exception raised when no release carries the requested version string.

    Attributes:
        version: The version string that was looked up.
    """

    def __init__(self, version: str, endpoint: str | None = None) -> None:
        super().__init__(
            f"Cannot find release with version: {version}", endpoint=endpoint
        )
        self.version = version
