"""
OpenCage Geocoder exceptions

This module defines the exception hierarchy for the OpenCage geocoder client.
All client errors inherit from OpenCageError base class.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import GeocodeResult


class OpenCageError(Exception):
    """
    Base exception for all OpenCage client errors.

    Catch this to handle any geocoder error generically.
    """

    pass


class ConfigError(OpenCageError):
    """
    Exception raised when client configuration is invalid.

    Raised while loading configuration when:
    - The configuration file is missing or not valid TOML
    - The [opencage] section is missing
    - The API key is missing or still a placeholder
    """

    pass


class TransportError(OpenCageError):
    """
    Exception raised when the HTTP request itself fails.

    Wraps network level errors such as:
    - DNS resolution failures
    - Connection refused or reset
    - Request timeouts

    Args:
        message: Description of the transport error
        originalError: The httpx exception that caused this error (optional)
    """

    def __init__(self, message: str, originalError: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.originalError = originalError


class DecodeError(OpenCageError):
    """
    Exception raised when the response body is not a valid geocode envelope.

    Args:
        message: Description of what did not match
        httpStatus: HTTP status of the response (optional)
        originalError: The parsing exception that caused this error (optional)
    """

    def __init__(
        self,
        message: str,
        httpStatus: Optional[int] = None,
        originalError: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.httpStatus = httpStatus
        self.originalError = originalError


class GeocodeError(OpenCageError):
    """Returned status code is not 200, dood!

    Carries the whole decoded response so callers can branch on the code
    (400 bad request, 401 invalid key, 402 quota exceeded, 403 disabled key,
    429 too many requests, ...).

    Attributes:
        result: Full decoded GeocodeResult
        code: Status code from the response body
        message: Status message from the response body, verbatim
    """

    def __init__(self, result: "GeocodeResult"):
        self.result = result
        self.code: int = result["status"]["code"]
        self.message: str = result["status"]["message"]
        super().__init__(f"{self.code}: {self.message}")
