from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import CallStatus


class InstagramError(Exception):
    pass


class ConfigurationError(InstagramError):
    pass


class AuthenticationRequired(InstagramError):
    def __init__(self, resource_path: str):
        super().__init__(f"{resource_path} - This method requires an authenticated users access token.")
        self.resource_path = resource_path


class InvalidArgument(InstagramError, ValueError):
    pass


class TransportError(InstagramError):
    pass


class MalformedResponse(InstagramError):
    pass


class ApiError(InstagramError):
    """The API answered with an error envelope (``code``/``error_type``/``error_message``)."""

    def __init__(
        self,
        code: int,
        error_type: Optional[str] = None,
        error_message: Optional[str] = None,
        status: Optional["CallStatus"] = None,
    ):
        super().__init__(f"Instagram API error {code} ({error_type}): {error_message}")
        self.code = code
        self.error_type = error_type
        self.error_message = error_message
        self.status = status
