# instagram_connector/main.py
import threading
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import RedirectResponse

from .client import InstagramAuthClient
from .config import SERVICE_NAME
from .errors import (
    ApiError,
    AuthenticationRequired,
    ConfigurationError,
    InstagramError,
    InvalidArgument,
    MalformedResponse,
    TransportError,
)
from .logging_config import setup_logging

app = FastAPI(title="Instagram Connector", version="1.0.0")

# One client per process; the access token lives only in memory.
# Routes run in a threadpool and the client keeps per-call state, so every use
# of it goes through _client_lock.
_state = {"client": None}
_client_lock = threading.RLock()


# ---- Startup ----
@app.on_event("startup")
def startup():
    setup_logging()


def get_client() -> InstagramAuthClient:
    # Lazy client creation so app can boot even if env vars are temporarily missing
    with _client_lock:
        if _state["client"] is None:
            try:
                _state["client"] = InstagramAuthClient.from_env()
            except ConfigurationError as e:
                raise HTTPException(status_code=500, detail={"error": "configuration", "message": str(e)})
        return _state["client"]


def _http_error(e: InstagramError) -> HTTPException:
    if isinstance(e, AuthenticationRequired):
        return HTTPException(status_code=401, detail={"error": "login required", "message": str(e)})
    if isinstance(e, InvalidArgument):
        return HTTPException(status_code=400, detail={"error": "invalid argument", "message": str(e)})
    if isinstance(e, ApiError):
        return HTTPException(
            status_code=e.code if 400 <= e.code < 600 else 502,
            detail={"error": e.error_type, "message": e.error_message, "code": e.code},
        )
    if isinstance(e, (TransportError, MalformedResponse)):
        return HTTPException(status_code=502, detail={"error": "instagram request failed", "message": str(e)})
    return HTTPException(status_code=500, detail={"error": type(e).__name__, "message": str(e)})


# ---- Health ----
@app.get("/")
def root():
    return {"ok": True, "service": SERVICE_NAME}


@app.get("/ping")
def ping():
    return {"ok": True}


# ---- OAuth ----
@app.get("/login")
def login(scope: List[str] = Query(default=["basic"]), c: InstagramAuthClient = Depends(get_client)):
    try:
        with _client_lock:
            url = c.get_login_url(scope)
    except InstagramError as e:
        raise _http_error(e)
    return RedirectResponse(url)


@app.get("/callback")
def callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    c: InstagramAuthClient = Depends(get_client),
):
    """
    Redirect target registered with Instagram.
    Exchanges the code and keeps the token on the shared client.
    """
    if error or not code:
        raise HTTPException(status_code=400, detail={"error": error or "missing code", "message": error_description})

    try:
        with _client_lock:
            oauth = c.get_oauth_token(code)
            c.set_access_token(oauth)
            authenticated = bool(c.access_token)
    except InstagramError as e:
        raise _http_error(e)

    if not authenticated:
        raise HTTPException(status_code=502, detail={"error": "no access token in OAuth response"})
    return {"ok": True, "user": oauth.get("user")}


@app.get("/status")
def status(c: InstagramAuthClient = Depends(get_client)):
    with _client_lock:
        return {
            "authenticated": bool(c.access_token),
            "rate_limit": c.rate_limit,
            "code": c.code,
            "error_type": c.error_type,
            "error_message": c.error_message,
        }


# ---- Instagram passthroughs ----
@app.get("/instagram/users/{user_id}")
def user(user_id: str, c: InstagramAuthClient = Depends(get_client)):
    try:
        with _client_lock:
            res = c.get_user(0 if user_id == "self" else user_id)
    except InstagramError as e:
        raise _http_error(e)
    return {"ok": True, "data": res.data, "rate_limit": res.status.rate_limit_remaining}


@app.get("/instagram/users/{user_id}/media")
def user_media(user_id: str, count: int = 20, c: InstagramAuthClient = Depends(get_client)):
    try:
        with _client_lock:
            res = c.get_user_media(0 if user_id == "self" else user_id, limit=count)
    except InstagramError as e:
        raise _http_error(e)
    return {"ok": True, "data": res.data, "pagination": res.pagination}


@app.get("/instagram/tags/{name}/media")
def tag_media(name: str, count: int = 20, c: InstagramAuthClient = Depends(get_client)):
    try:
        with _client_lock:
            res = c.get_tag_media(name, limit=count)
    except InstagramError as e:
        raise _http_error(e)
    return {"ok": True, "data": res.data, "pagination": res.pagination}
