"""
signing.py

Signed requests ("Enforce signed requests" in the app settings):
  base = "/" + endpoint + "|k=v" for each param, sorted by key
  sig  = HMAC_SHA256(api_secret, base).hexdigest()

The auth fragment contributes only its first pair (access_token=...), which is
what the API signs as well.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigurationError


def _first_pair(auth_query: str) -> Optional[Tuple[str, str]]:
    fragment = auth_query.lstrip("?&")
    if not fragment:
        return None
    first = fragment.split("&", 1)[0]
    key, _, value = first.partition("=")
    return key, value


def _base_string(endpoint: str, auth_query: str, params: Optional[Dict[str, Any]]) -> str:
    signed = {k: v for k, v in (params or {}).items() if v is not None}

    pair = _first_pair(auth_query)
    if pair is not None:
        signed[pair[0]] = pair[1]

    base = "/" + endpoint
    for key in sorted(signed, key=lambda k: k.encode("utf-8")):
        base += f"|{key}={signed[key]}"
    return base


def sign(api_secret: Optional[str], endpoint: str, auth_query: str, params: Optional[Dict[str, Any]] = None) -> str:
    if not api_secret:
        raise ConfigurationError("Signed requests require the API secret")

    base = _base_string(endpoint, auth_query, params)
    return hmac.new(api_secret.encode("utf-8"), base.encode("utf-8"), hashlib.sha256).hexdigest()
