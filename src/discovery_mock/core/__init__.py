from .errors import (
    DiscoveryMockError,
    InvalidRegistrationError,
    InvalidStatusError,
    ServerLifecycleError,
    UnsupportedMediaTypeError,
)

__all__ = [
    "DiscoveryMockError",
    "InvalidRegistrationError",
    "InvalidStatusError",
    "ServerLifecycleError",
    "UnsupportedMediaTypeError",
]
