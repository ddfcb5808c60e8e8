"""Per-client rate limiting for the public endpoints."""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from formcraft.config import get_settings

settings = get_settings()

RATE_LIMIT_MESSAGE = "Too many requests, please try again later"


def client_ip(request: Request) -> Optional[str]:
    """
    The respondent's address.

    ``X-Forwarded-For`` is only honoured when the direct peer is a trusted
    proxy; the rightmost untrusted hop in the chain is the client.
    """
    peer = request.client.host if request.client else None
    trusted = settings.trusted_proxies_list
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded or peer not in trusted:
        return peer
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted:
            return hop
    return hops[0] if hops else peer


def rate_limit_key(request: Request) -> str:
    return client_ip(request) or "unknown"


def public_limit() -> str:
    return f"{settings.rate_limit_requests}/{settings.rate_limit_window_seconds} seconds"


limiter = Limiter(key_func=rate_limit_key)

# One budget per client across every public route
limit_public = limiter.shared_limit(public_limit, scope="public", error_message=RATE_LIMIT_MESSAGE)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": RATE_LIMIT_MESSAGE},
    )
