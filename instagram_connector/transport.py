"""
transport.py

Every Instagram call goes through CallDispatcher:
- resource calls: <api_url><path>?access_token=...&client_id=...[&params][&sig=...]
    GET    -> params in the query string
    POST   -> params form-encoded in the body
    DELETE -> no body
- the OAuth code exchange: POST form to the token URL (no access token yet)
- the oEmbed lookup: plain GET, no credentials

Responses are reduced to (rate limit header, decoded JSON) and classified in
models.classify().

A dispatcher keeps the last call's status and rate limit for the client's
compatibility accessors. It is not safe to share between threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import requests

from .config import Credentials, InstagramConfig
from .errors import ApiError, AuthenticationRequired, ConfigurationError, MalformedResponse, TransportError
from .headers import header_block, process_headers, rate_limit_remaining
from .models import ApiResponse, CallStatus, ErrorEnvelope, classify
from .signing import sign

logger = logging.getLogger(__name__)


class Verb(str, Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


@dataclass(frozen=True)
class RequestSpec:
    resource_path: str
    params: Dict[str, Any] = field(default_factory=dict)
    verb: Verb = Verb.GET

    def __post_init__(self):
        object.__setattr__(self, "verb", Verb(self.verb))

    def encoded_params(self) -> Dict[str, Any]:
        """Params that go on the wire: None values are dropped."""
        return {k: _scalar(v) for k, v in self.params.items() if v is not None}


class CallDispatcher:
    def __init__(
        self,
        config: InstagramConfig,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.credentials = credentials
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        self.status = CallStatus()
        self.rate_limit: Optional[int] = None

    @property
    def timeout(self) -> Tuple[int, int]:
        return (self.config.connect_timeout_seconds, self.config.timeout_seconds)

    def auth_query(self) -> str:
        return f"?access_token={self.credentials.access_token}&client_id={self.credentials.api_key}"

    # ---- resource calls ----
    def execute(self, resource_path: str, params: Optional[Dict[str, Any]] = None, verb: Verb = Verb.GET) -> ApiResponse:
        return self.dispatch(RequestSpec(resource_path=resource_path, params=dict(params or {}), verb=Verb(verb)))

    def build_request(self, spec: RequestSpec) -> Tuple[str, Optional[Dict[str, Any]]]:
        """Return (url, form body) for a resource call."""
        if not self.credentials.access_token:
            raise AuthenticationRequired(spec.resource_path)

        auth = self.auth_query()
        params = spec.encoded_params()
        url = f"{self.config.api_url}{spec.resource_path}{auth}"
        body: Optional[Dict[str, Any]] = None

        if spec.verb is Verb.GET:
            if params:
                url += "&" + urlencode(params)
        elif spec.verb is Verb.POST:
            body = params
        elif spec.verb is Verb.DELETE:
            pass
        else:
            raise ValueError(f"Unsupported HTTP verb: {spec.verb!r}")

        if self.credentials.signed_header:
            url += "&sig=" + sign(self.credentials.api_secret, spec.resource_path, auth, params)

        return url, body

    def dispatch(self, spec: RequestSpec) -> ApiResponse:
        url, body = self.build_request(spec)

        logger.debug("Instagram %s %s", spec.verb.value, spec.resource_path)
        resp = self._send(spec.verb.value, url, data=body, what=spec.resource_path)

        self.rate_limit = rate_limit_remaining(process_headers(header_block(resp)))

        if not resp.content:
            raise TransportError(f"Empty response from Instagram for {spec.resource_path} (HTTP {resp.status_code})")

        payload = self._decode(resp, spec.resource_path)

        try:
            result = classify(payload, self.rate_limit)
        except ApiError as e:
            self.status = e.status or CallStatus(e.code, e.error_type, e.error_message, self.rate_limit)
            logger.warning("Instagram %s %s failed: %s", spec.verb.value, spec.resource_path, e)
            raise

        self.status = result.status
        return result

    # ---- OAuth ----
    def exchange(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for an access token (authorization-code grant)."""
        if not self.credentials.api_secret or not self.credentials.api_callback:
            raise ConfigurationError("The OAuth code exchange requires the API secret and callback URL")

        api_data = {
            "grant_type": "authorization_code",
            "client_id": self.credentials.api_key,
            "client_secret": self.credentials.api_secret,
            "redirect_uri": self.credentials.api_callback,
            "code": code,
        }

        logger.debug("Instagram OAuth code exchange")
        resp = self._send("POST", self.config.oauth_token_url, data=api_data, what="oauth/access_token")
        self.rate_limit = rate_limit_remaining(process_headers(header_block(resp)))
        if not resp.content:
            raise TransportError(f"Empty response from Instagram OAuth token endpoint (HTTP {resp.status_code})")

        payload = self._decode(resp, "oauth/access_token")
        if not isinstance(payload, dict):
            raise MalformedResponse(f"OAuth token response is not an object: {str(payload)[:800]}")

        if "access_token" not in payload:
            failure = ErrorEnvelope.parse(payload)
            if failure is not None:
                self.status = CallStatus(failure.code, failure.error_type, failure.error_message, self.rate_limit)
                logger.warning("Instagram OAuth code exchange failed: %s %s", failure.code, failure.error_type)
                raise ApiError(failure.code, failure.error_type, failure.error_message, status=self.status)

        # token responses carry no meta; the HTTP status stands in for meta.code
        self.status = CallStatus(code=resp.status_code, rate_limit_remaining=self.rate_limit)
        return payload

    # ---- unauthenticated ----
    def fetch_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        resp = self._send("GET", url, params=params, what=url)
        if not resp.content:
            raise TransportError(f"Empty response from {url} (HTTP {resp.status_code})")
        return self._decode(resp, url)

    # ---- helpers ----
    def _send(self, method: str, url: str, *, what: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Network error calling Instagram ({what}): {e}") from e

    @staticmethod
    def _decode(resp: requests.Response, what: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponse(f"Instagram response for {what} was not JSON: {resp.text[:800]}") from e
