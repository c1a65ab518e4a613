"""
Custom exceptions for sofacheck.

This module defines domain-specific exceptions so callers can tell
configuration, feed, cache and host-introspection failures apart.
"""


class SofacheckError(Exception):
    """
    Base exception for all sofacheck errors.

    All custom exceptions in sofacheck inherit from this class
    to allow for easy catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
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


class ConfigurationError(SofacheckError):
    """
    Exception raised when configuration is invalid.

    This includes:
    - Feed URLs with an unsupported scheme or no host
    - Invalid timeout values
    """

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when the configuration file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Feed Errors
# =============================================================================


class FeedError(SofacheckError):
    """Base exception for problems with the SOFA feed."""

    pass


class FeedFetchError(FeedError):
    """
    Exception raised when the feed cannot be retrieved.

    Attributes:
        url: The feed URL that was requested.
        status_code: The HTTP status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class FeedParseError(FeedError):
    """
    Exception raised when the feed body is malformed or lacks the expected shape.

    The ``detail`` attribute carries the parser message that ends up in the
    result row's status column.
    """

    def __init__(self, detail: str) -> None:
        super().__init__("Could not parse SOFA feed", detail)
        self.detail = detail


# =============================================================================
# Host Errors
# =============================================================================


class HostFactsError(SofacheckError):
    """Exception raised when the host OS version or hardware model cannot be determined."""

    pass
