"""Instagram v1 API connector.

Import the clients and error types from here:

- InstagramClient: public-data client (API key only)
- InstagramAuthClient: user-level client (key, secret, callback)
"""

from .client import InstagramAuthClient, InstagramClient
from .config import InstagramConfig, InstagramOAuthConfig
from .errors import (
    ApiError,
    AuthenticationRequired,
    ConfigurationError,
    InstagramError,
    InvalidArgument,
    MalformedResponse,
    TransportError,
)
from .models import ApiResponse, CallStatus
from .transport import Verb

__all__ = [
    "ApiError",
    "ApiResponse",
    "AuthenticationRequired",
    "CallStatus",
    "ConfigurationError",
    "InstagramAuthClient",
    "InstagramClient",
    "InstagramConfig",
    "InstagramError",
    "InstagramOAuthConfig",
    "InvalidArgument",
    "MalformedResponse",
    "TransportError",
    "Verb",
]
