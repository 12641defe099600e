"""
client.py

Typed facade over the Instagram v1 API.

Two clients, picked by what you hold:
- InstagramClient.from_api_key(key)
    public data; calls still need an access token set via set_access_token()
- InstagramAuthClient.from_credentials(key, secret, callback)
    everything above plus the login URL, the OAuth code exchange and signed
    requests

Every endpoint method returns an ApiResponse (payload + CallStatus) or raises
an InstagramError subclass. The client also mirrors the last call's status
(code, error_type, error_message, rate_limit); those fields are overwritten by
every call, so serialize access if one client is shared between threads.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Sequence
from urllib.parse import quote_plus

import requests

from .config import (
    ACTIONS,
    API_OEMBED_URL,
    SCOPES,
    SHORTLINK_URL,
    Credentials,
    InstagramConfig,
    InstagramOAuthConfig,
)
from .errors import ConfigurationError, InvalidArgument, MalformedResponse
from .models import ApiResponse
from .pagination import next_page
from .transport import CallDispatcher, RequestSpec, Verb

logger = logging.getLogger(__name__)


class InstagramClient:
    def __init__(self, config: InstagramConfig, *, session: Optional[requests.Session] = None):
        if not isinstance(config, InstagramConfig):
            raise ConfigurationError(f"Configuration data is missing or invalid: {type(config).__name__}")

        self.config = config
        self.credentials = Credentials.from_config(config)
        self._dispatcher = CallDispatcher(config, self.credentials, session=session)

    @classmethod
    def from_api_key(cls, api_key: str, **kwargs: Any) -> "InstagramClient":
        if not isinstance(api_key, str) or not api_key.strip():
            raise ConfigurationError("An API key is required")
        return cls(InstagramConfig(api_key=api_key.strip()), **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "InstagramClient":
        return cls(InstagramConfig.from_env(), **kwargs)

    # ---- credentials ----
    @property
    def api_key(self) -> str:
        return self.credentials.api_key

    @api_key.setter
    def api_key(self, value: str) -> None:
        self.credentials.api_key = value

    @property
    def access_token(self) -> Optional[str]:
        return self.credentials.access_token

    @access_token.setter
    def access_token(self, value: Optional[str]) -> None:
        self.credentials.access_token = value

    def set_access_token(self, data: Any) -> None:
        """Accept a raw token or an OAuth token response (mapping or object with access_token)."""
        if isinstance(data, dict):
            token = data.get("access_token")
        elif isinstance(data, str) or data is None:
            token = data
        else:
            token = getattr(data, "access_token", None)
        self.credentials.access_token = token

    # ---- last call status ----
    @property
    def rate_limit(self) -> Optional[int]:
        """X-Ratelimit-Remaining from the last response (calls left in the window)."""
        return self._dispatcher.rate_limit

    @property
    def code(self) -> Optional[int]:
        return self._dispatcher.status.code

    @property
    def error_message(self) -> Optional[str]:
        return self._dispatcher.status.error_message

    @property
    def error_type(self) -> Optional[str]:
        return self._dispatcher.status.error_type

    def call(self, resource_path: str, params: Optional[Dict[str, Any]] = None, verb: Verb = Verb.GET) -> ApiResponse:
        return self._dispatcher.execute(resource_path, params, verb)

    # ---- users ----
    def search_user(self, name: str, limit: int = 100) -> ApiResponse:
        return self.call("users/search", {"q": name, "limit": limit})

    def get_user(self, user_id: Any = 0) -> ApiResponse:
        return self.call(f"users/{user_id or 'self'}")

    def get_user_media(self, user_id: Any = 0, limit: int = 100) -> ApiResponse:
        return self.call(f"users/{user_id or 'self'}/media/recent", {"count": limit})

    def get_user_likes(self, limit: int = 100, max_like_id: Optional[str] = None) -> ApiResponse:
        return self.call("users/self/media/liked", {"count": limit, "max_like_id": max_like_id})

    def get_user_follows(self, limit: int = 100) -> ApiResponse:
        return self.call("users/self/follows", {"count": limit})

    def get_user_follower(self, limit: int = 100) -> ApiResponse:
        return self.call("users/self/followed-by", {"count": limit})

    def get_user_request(self, limit: int = 100) -> ApiResponse:
        return self.call("users/self/requested-by", {"count": limit})

    # ---- relationships ----
    def get_user_relationship(self, user_id: Any = 0) -> ApiResponse:
        return self.call(f"users/{user_id}/relationship")

    def modify_relationship(self, action: str, user_id: Any) -> ApiResponse:
        if action not in ACTIONS:
            raise InvalidArgument(
                f"modify_relationship() requires an action in {', '.join(ACTIONS)} and the target user id (got {action!r})"
            )
        return self.call(f"users/{user_id}/relationship", {"action": action}, Verb.POST)

    # ---- media ----
    def search_media(self, lat: float, lng: float, distance: int = 1000) -> ApiResponse:
        return self.call("media/search", {"lat": lat, "lng": lng, "distance": distance})

    def get_media(self, media_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}")

    def get_media_short(self, code: str) -> ApiResponse:
        """Same as get_media(), addressed by the shortcode from the shortlink (instagram.com/p/<code>/)."""
        return self.call(f"media/shortcode/{code}")

    def get_media_likes(self, media_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}/likes")

    def like_media(self, media_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}/likes", None, Verb.POST)

    def delete_liked_media(self, media_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}/likes", None, Verb.DELETE)

    def get_media_comments(self, media_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}/comments")

    def add_media_comment(self, media_id: str, text: str) -> ApiResponse:
        return self.call(f"media/{media_id}/comments", {"text": text}, Verb.POST)

    def delete_media_comment(self, media_id: str, comment_id: str) -> ApiResponse:
        return self.call(f"media/{media_id}/comments/{comment_id}", None, Verb.DELETE)

    # ---- tags ----
    def search_tags(self, name: str) -> ApiResponse:
        return self.call("tags/search", {"q": name})

    def get_tag(self, name: str) -> ApiResponse:
        return self.call(f"tags/{name}")

    def get_tag_media(
        self,
        name: str,
        limit: int = 100,
        min_tag_id: Optional[str] = None,
        max_tag_id: Optional[str] = None,
    ) -> ApiResponse:
        params = {"count": limit, "min_tag_id": min_tag_id, "max_tag_id": max_tag_id}
        return self.call(f"tags/{name}/media/recent", params)

    # ---- locations ----
    def get_location(self, location_id: Any) -> ApiResponse:
        return self.call(f"locations/{location_id}")

    def get_location_media(self, location_id: Any) -> ApiResponse:
        return self.call(f"locations/{location_id}/media/recent")

    def search_location(
        self,
        lat: float,
        lng: float,
        fb_places_id: Optional[str] = None,
        distance: int = 1000,
    ) -> ApiResponse:
        """Search locations around a point (max distance 5000m). fb_places_id makes lat/lng optional."""
        params = {"lat": lat, "lng": lng, "facebook_places_id": fb_places_id, "distance": distance}
        return self.call("locations/search", params)

    # ---- oEmbed ----
    def get_oembed(self, q: str) -> Any:
        """Embed code and media info for a shortlink or bare shortcode. No access token needed."""
        if "http" not in q:
            q = SHORTLINK_URL + q
        return self._dispatcher.fetch_json(API_OEMBED_URL, params={"hidecaption": "true", "url": q})

    def get_media_id(self, q: str) -> Optional[str]:
        data = self.get_oembed(q)
        if isinstance(data, dict):
            return data.get("media_id")
        return None

    # ---- pagination ----
    def pagination(self, response: Any, limit: int = 0) -> Optional[ApiResponse]:
        """Fetch the page after `response`, or None on the last page."""
        spec = next_page(response, limit, api_url=self.config.api_url)
        if spec is None:
            return None
        return self._dispatcher.dispatch(spec)

    def iter_pages(self, response: ApiResponse, limit: int = 0) -> Iterator[ApiResponse]:
        """Yield `response` and every page after it."""
        page = response
        sent: Optional[RequestSpec] = None
        while True:
            yield page
            spec = next_page(page, limit, api_url=self.config.api_url)
            # a page pointing back at the request that produced it ends the walk
            if spec is None or spec == sent:
                return
            page = self._dispatcher.dispatch(spec)
            sent = spec


class InstagramAuthClient(InstagramClient):
    """Client for user-level flows: OAuth login, code exchange, signed requests."""

    config: InstagramOAuthConfig

    def __init__(self, config: InstagramOAuthConfig, *, session: Optional[requests.Session] = None):
        if not isinstance(config, InstagramOAuthConfig):
            raise ConfigurationError(
                "InstagramAuthClient needs an InstagramOAuthConfig (apiKey, apiSecret, apiCallback)"
            )
        super().__init__(config, session=session)

    @classmethod
    def from_credentials(
        cls, api_key: str, api_secret: str, api_callback: str, **kwargs: Any
    ) -> "InstagramAuthClient":
        if not all(isinstance(v, str) and v.strip() for v in (api_key, api_secret, api_callback)):
            raise ConfigurationError("apiKey, apiSecret and apiCallback are all required")
        config = InstagramOAuthConfig(
            api_key=api_key.strip(),
            api_secret=api_secret.strip(),
            api_callback=api_callback.strip(),
        )
        return cls(config, **kwargs)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "InstagramAuthClient":
        return cls(InstagramOAuthConfig.from_env(), **kwargs)

    @property
    def api_secret(self) -> Optional[str]:
        return self.credentials.api_secret

    @api_secret.setter
    def api_secret(self, value: str) -> None:
        self.credentials.api_secret = value

    @property
    def api_callback(self) -> Optional[str]:
        return self.credentials.api_callback

    @api_callback.setter
    def api_callback(self, value: str) -> None:
        self.credentials.api_callback = value

    @property
    def signed_header(self) -> bool:
        return self.credentials.signed_header

    def set_signed_header(self, signed_header: bool) -> None:
        """Sign every resource call with the API secret (sig=...)."""
        self.credentials.signed_header = bool(signed_header)

    def get_login_url(self, scopes: Sequence[str] = ("basic",)) -> str:
        """OAuth authorize URL to send the user to; `scopes` must be a subset of SCOPES."""
        if not isinstance(scopes, (list, tuple)) or any(s not in SCOPES for s in scopes):
            raise InvalidArgument(f"get_login_url() - scopes must be a list drawn from {', '.join(SCOPES)}")

        return (
            f"{self.config.oauth_url}?client_id={self.api_key}"
            f"&redirect_uri={quote_plus(self.api_callback or '')}"
            f"&scope={'+'.join(scopes)}&response_type=code"
        )

    def get_oauth_token(self, code: str, token_only: bool = False) -> Any:
        """Exchange the callback `code` for the OAuth data (or just the access token)."""
        result = self._dispatcher.exchange(code)
        logger.info("Obtained Instagram access token for client %s", self.api_key)
        if not token_only:
            return result

        token = result.get("access_token")
        if not token:
            raise MalformedResponse("OAuth token response has no access_token")
        return token
