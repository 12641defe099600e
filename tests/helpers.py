"""Canned requests responses for tests."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests

API_KEY = "client123"
API_SECRET = "secret"
API_CALLBACK = "https://example.com/callback?x=1"
ACCESS_TOKEN = "tok"


def make_response(
    payload: Any = None,
    *,
    status_code: int = 200,
    reason: str = "OK",
    headers: Optional[Dict[str, str]] = None,
    body: Optional[bytes] = None,
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = reason
    resp.encoding = "utf-8"
    resp.headers.update(headers if headers is not None else {"X-Ratelimit-Remaining": "4999"})
    resp._content = body if body is not None else json.dumps(payload).encode("utf-8")
    return resp


def ok_payload(data: Any = None, **extra: Any) -> Dict[str, Any]:
    payload = {"meta": {"code": 200}, "data": data if data is not None else []}
    payload.update(extra)
    return payload
