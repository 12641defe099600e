from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .errors import MalformedResponse


STATUS_LINE_KEY = "http_code"
RATE_LIMIT_HEADER = "X-Ratelimit-Remaining"

_HTTP_VERSIONS = {10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2"}


def split_response(raw: str) -> Tuple[str, str]:
    """
    Split a raw HTTP message into (header block, body) at the first blank line.

    The dispatcher never sees raw text (see header_block()); this is for callers
    holding a captured or logged response, e.g. to feed process_headers().
    """
    header_content, sep, body = raw.partition("\r\n\r\n")
    if not sep:
        return header_content, ""
    return header_content, body


def header_block(resp: Any) -> str:
    """Render a requests response's status line and header fields as a raw CRLF block."""
    version = _HTTP_VERSIONS.get(getattr(resp.raw, "version", None), "HTTP/1.1")
    lines = [f"{version} {resp.status_code} {resp.reason or ''}".rstrip()]
    for key, value in resp.headers.items():
        lines.append(f"{key}: {value}")
    return "\r\n".join(lines)


def process_headers(header_content: str) -> Dict[str, str]:
    """
    Convert a raw header block into a dict.

    The first line (status line) is kept verbatim under "http_code".
    Every other line is split on its first colon.
    """
    headers: Dict[str, str] = {}

    for i, line in enumerate(header_content.split("\r\n")):
        if i == 0:
            headers[STATUS_LINE_KEY] = line
            continue
        if not line:
            continue

        key, sep, value = line.partition(":")
        if not sep:
            raise MalformedResponse(f"Malformed response header line: {line!r}")
        headers[key] = value.strip()

    return headers


def rate_limit_remaining(headers: Dict[str, str]) -> Optional[int]:
    raw = headers.get(RATE_LIMIT_HEADER)
    if raw is None:
        # servers are not consistent about the casing
        wanted = RATE_LIMIT_HEADER.lower()
        raw = next((v for k, v in headers.items() if k.lower() == wanted), None)
    if raw is None or raw == "":
        return None

    try:
        return int(raw)
    except ValueError as e:
        raise MalformedResponse(f"Non-numeric {RATE_LIMIT_HEADER} header: {raw!r}") from e
