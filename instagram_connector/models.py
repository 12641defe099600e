"""
models.py

Result types for API calls and the success/error discrimination applied to
every decoded JSON payload.

Parsing is ordered: a payload is first read as a success envelope (holds
"meta"), then as an error envelope (holds a top-level "code"); anything else
is a MalformedResponse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ApiError, MalformedResponse


@dataclass(frozen=True)
class CallStatus:
    code: Optional[int] = 0
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    rate_limit_remaining: Optional[int] = None


@dataclass(frozen=True)
class SuccessEnvelope:
    meta: Dict[str, Any]
    payload: Dict[str, Any]

    @staticmethod
    def parse(payload: Any) -> Optional["SuccessEnvelope"]:
        if not isinstance(payload, dict) or "meta" not in payload:
            return None
        meta = payload["meta"]
        if not isinstance(meta, dict):
            raise MalformedResponse(f"Response meta is not an object: {meta!r}")
        return SuccessEnvelope(meta=meta, payload=payload)

    @property
    def code(self) -> Optional[int]:
        # a meta without a code is still a success
        raw = self.meta.get("code")
        return None if raw is None else _as_code(raw)


@dataclass(frozen=True)
class ErrorEnvelope:
    code: int
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    @staticmethod
    def parse(payload: Any) -> Optional["ErrorEnvelope"]:
        if not isinstance(payload, dict) or "code" not in payload:
            return None
        return ErrorEnvelope(
            code=_as_code(payload.get("code")),
            error_type=payload.get("error_type"),
            error_message=payload.get("error_message"),
        )


@dataclass(frozen=True)
class ApiResponse:
    """A successful call: the decoded payload plus the status it came with."""

    payload: Dict[str, Any]
    status: CallStatus = field(default_factory=CallStatus)

    @property
    def meta(self) -> Dict[str, Any]:
        return self.payload.get("meta") or {}

    @property
    def data(self) -> Any:
        return self.payload.get("data")

    @property
    def pagination(self) -> Optional[Dict[str, Any]]:
        return self.payload.get("pagination")

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


def _as_code(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Response code is not an integer: {raw!r}") from e


def classify(payload: Any, rate_limit_remaining: Optional[int] = None) -> ApiResponse:
    success = SuccessEnvelope.parse(payload)
    if success is not None:
        status = CallStatus(code=success.code, rate_limit_remaining=rate_limit_remaining)
        return ApiResponse(payload=success.payload, status=status)

    failure = ErrorEnvelope.parse(payload)
    if failure is not None:
        status = CallStatus(
            code=failure.code,
            error_type=failure.error_type,
            error_message=failure.error_message,
            rate_limit_remaining=rate_limit_remaining,
        )
        raise ApiError(failure.code, failure.error_type, failure.error_message, status=status)

    raise MalformedResponse(f"Response is neither a success nor an error envelope: {str(payload)[:800]}")
