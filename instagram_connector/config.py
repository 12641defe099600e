from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError


def env(name: str, default: str = "") -> str:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip()


def env_int(name: str, default: int) -> int:
    raw = env(name, "")
    if raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = env(name, "")
    if raw == "":
        return default
    return raw.lower() in ("1", "true", "yes", "y", "on")


def _mask(s: Optional[str], keep: int = 4) -> str:
    if not s:
        return ""
    if len(s) <= keep:
        return "*" * len(s)
    return s[:keep] + "*" * (len(s) - keep)


# Instagram endpoints (fixed by the remote API)
API_URL = "https://api.instagram.com/v1/"
API_OAUTH_URL = "https://api.instagram.com/oauth/authorize"
API_OAUTH_TOKEN_URL = "https://api.instagram.com/oauth/access_token"
API_OEMBED_URL = "https://api.instagram.com/oembed/"
SHORTLINK_URL = "https://www.instagram.com/p/"

DEFAULT_CONNECT_TIMEOUT = 20
DEFAULT_TIMEOUT = 90

SCOPES = ("basic", "likes", "comments", "relationships", "public_content", "follower_list")
ACTIONS = ("follow", "unfollow", "approve", "ignore")

# Service (do NOT hard-fail at import time)
SERVICE_NAME = env("SERVICE_NAME", "instagram-connector")
DEBUG = env_bool("DEBUG", False)
LOG_LEVEL = env("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()


@dataclass
class Credentials:
    """Mutable credential store read by every request; only setters change it."""

    api_key: str
    api_secret: Optional[str] = None
    api_callback: Optional[str] = None
    access_token: Optional[str] = None
    signed_header: bool = False

    @staticmethod
    def from_config(config: "InstagramConfig") -> "Credentials":
        return Credentials(
            api_key=config.api_key,
            api_secret=getattr(config, "api_secret", None) or None,
            api_callback=getattr(config, "api_callback", None) or None,
        )


@dataclass(frozen=True)
class InstagramConfig:
    """Settings for a client that only reads public data.

    Only the API key (client ID) is needed; everything else has defaults.
    """

    api_key: str
    connect_timeout_seconds: int = DEFAULT_CONNECT_TIMEOUT
    timeout_seconds: int = DEFAULT_TIMEOUT
    api_url: str = API_URL
    oauth_url: str = API_OAUTH_URL
    oauth_token_url: str = API_OAUTH_TOKEN_URL

    @staticmethod
    def from_env() -> "InstagramConfig":
        api_key = env("INSTAGRAM_API_KEY")
        if not api_key:
            raise ConfigurationError("Missing env var INSTAGRAM_API_KEY")

        return InstagramConfig(
            api_key=api_key,
            connect_timeout_seconds=env_int("INSTAGRAM_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            timeout_seconds=env_int("INSTAGRAM_TIMEOUT", DEFAULT_TIMEOUT),
        )

    @staticmethod
    def from_values(
        *,
        api_key: Optional[str] = None,
        connect_timeout_seconds: Optional[int] = None,
        timeout_seconds: Optional[int] = None,
    ) -> "InstagramConfig":
        k = (api_key or env("INSTAGRAM_API_KEY")).strip()
        if not k:
            raise ConfigurationError("Missing api_key / INSTAGRAM_API_KEY")

        return InstagramConfig(
            api_key=k,
            connect_timeout_seconds=int(connect_timeout_seconds or env_int("INSTAGRAM_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT)),
            timeout_seconds=int(timeout_seconds or env_int("INSTAGRAM_TIMEOUT", DEFAULT_TIMEOUT)),
        )


@dataclass(frozen=True)
class InstagramOAuthConfig(InstagramConfig):
    """Settings for a client acting on behalf of a user.

    Adds the OAuth client secret and the registered redirect URI, which the
    login URL, the code exchange and request signing all depend on.
    """

    api_secret: str = ""
    api_callback: str = ""

    @staticmethod
    def from_env() -> "InstagramOAuthConfig":
        return InstagramOAuthConfig.from_values()

    @staticmethod
    def from_values(
        *,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        api_callback: Optional[str] = None,
        connect_timeout_seconds: Optional[int] = None,
        timeout_seconds: Optional[int] = None,
    ) -> "InstagramOAuthConfig":
        k = (api_key or env("INSTAGRAM_API_KEY")).strip()
        s = (api_secret or env("INSTAGRAM_API_SECRET")).strip()
        cb = (api_callback or env("INSTAGRAM_API_CALLBACK")).strip()

        if not k or not s or not cb:
            raise ConfigurationError(
                "Missing Instagram OAuth credentials. "
                f"INSTAGRAM_API_KEY='{_mask(k)}' INSTAGRAM_API_SECRET='{_mask(s)}' INSTAGRAM_API_CALLBACK='{cb}'"
            )

        return InstagramOAuthConfig(
            api_key=k,
            api_secret=s,
            api_callback=cb,
            connect_timeout_seconds=int(connect_timeout_seconds or env_int("INSTAGRAM_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT)),
            timeout_seconds=int(timeout_seconds or env_int("INSTAGRAM_TIMEOUT", DEFAULT_TIMEOUT)),
        )
