from __future__ import annotations


class DiscoveryMockError(Exception):
    """Base exception for discovery mock errors."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class UnsupportedMediaTypeError(DiscoveryMockError):
    """Raised when a request asks for a representation other than JSON.

    This points at a misconfigured test rather than a runtime condition, so it
    is never turned into a response.
    """


class InvalidRegistrationError(DiscoveryMockError):
    """Raised when a registration body cannot be turned into an instance."""


class InvalidStatusError(DiscoveryMockError):
    """Raised when a status value is not a known instance status."""


class ServerLifecycleError(DiscoveryMockError):
    """Raised when the embedded server fails to start."""
