"""Shared Route Dependencies: rate limiting and webhook signature checks.

Invariants:
    - Rate limiting runs before the route body; an over-limit request never reaches the core
    - Webhook bodies are read raw and verified before any JSON parsing

Design Decisions:
    - Limiter built lazily from settings and kept per process
      (ADR: single-process uvicorn, same trade-off as the in-memory limiter itself)
"""

from fastapi import Request

from guesso.config import get_settings
from guesso.core.errors import RateLimitExceededError, SignatureError
from guesso.infrastructure.rate_limit import SlidingWindowRateLimiter, client_key
from guesso.services.integrations import signature_valid

_limiter: SlidingWindowRateLimiter | None = None


def get_rate_limiter() -> SlidingWindowRateLimiter:
    global _limiter
    if _limiter is None:
        settings = get_settings()
        _limiter = SlidingWindowRateLimiter(
            settings.rate_limit_max_requests, settings.rate_limit_window_seconds,
        )
    return _limiter


async def rate_limited(request: Request) -> None:
    """FastAPI dependency: 429 once the client exceeds its window."""
    if not get_settings().rate_limit_enabled:
        return
    limiter = get_rate_limiter()
    key = client_key(request)
    if not limiter.check(key):
        raise RateLimitExceededError(limiter.retry_after_ms(key))


async def signed_body(request: Request) -> bytes:
    """FastAPI dependency: raw body, only if X-Signature matches."""
    body = await request.body()
    if not signature_valid(
        body, request.headers.get("x-signature"), get_settings().webhook_secret,
    ):
        raise SignatureError()
    return body
