"""Rate limiting for expensive endpoints (manual sync trigger) using slowapi."""

from slowapi import Limiter
from starlette.requests import Request


def _client_key(request: Request) -> str:
    """Key requests by the originating client IP, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return request.client.host if request.client else "127.0.0.1"


limiter = Limiter(key_func=_client_key)
