from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

from .config import API_URL
from .models import ApiResponse
from .transport import RequestSpec, Verb

# credentials are re-added by the dispatcher
_AUTH_KEYS = frozenset({"access_token", "client_id", "sig"})


def _pagination_of(response: Any) -> Optional[Dict[str, Any]]:
    if isinstance(response, ApiResponse):
        return response.pagination
    if isinstance(response, dict):
        return response.get("pagination")
    return None


def _query_cursor(query: str) -> Dict[str, str]:
    return {k: v for k, v in parse_qsl(query) if k not in _AUTH_KEYS and k != "count"}


def next_page(response: Any, limit: int = 0, api_url: str = API_URL) -> Optional[RequestSpec]:
    """
    Work out the request for the page after `response`.

    Returns None when the response is not paginated or is the last page.
    The resource path comes from next_url; the cursor is next_max_id when the
    endpoint hands one out, then next_cursor. Endpoints paging on other keys
    (max_tag_id, max_like_id, ...) keep the cursor params of next_url's query.
    """
    pagination = _pagination_of(response)
    if not pagination:
        return None

    next_url = pagination.get("next_url")
    if not next_url:
        return None

    base, sep, query = next_url.partition("?")
    if not sep:
        return None

    resource_path = base.replace(api_url, "", 1)

    if pagination.get("next_max_id") is not None:
        params: Dict[str, Any] = {"max_id": pagination["next_max_id"], "count": limit}
    elif pagination.get("next_cursor") is not None:
        params = {"cursor": pagination["next_cursor"], "count": limit}
    else:
        params = {**_query_cursor(query), "count": limit}

    return RequestSpec(resource_path=resource_path, params=params, verb=Verb.GET)
