"""
In-memory sliding-window rate limit for the LLM-backed endpoints.

Counts live in this process only and are keyed by client IP.
"""
import logging
import math
import time
from collections import defaultdict, deque
from typing import Deque, Dict
from fastapi import Request, HTTPException, status

from app.core.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)

# {ip: request timestamps, oldest first}
rate_limit_store: Dict[str, Deque[float]] = defaultdict(deque)


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    first_hop = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else "unknown"


def prune_rate_limit_store(now: float, window_seconds: int) -> None:
    """Drop expired timestamps, and the IPs left with none."""
    for ip in list(rate_limit_store):
        hits = rate_limit_store[ip]
        while hits and hits[0] <= now - window_seconds:
            hits.popleft()
        if not hits:
            del rate_limit_store[ip]


def check_rate_limit(
    request: Request,
    max_requests: int = RATE_LIMIT_MAX_REQUESTS,
    window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
) -> None:
    """
    Record one request for the caller.

    Raises:
        HTTPException: 429 with Retry-After once `max_requests` already fall
            inside the last `window_seconds`
    """
    ip = get_client_ip(request)
    now = time.monotonic()
    prune_rate_limit_store(now, window_seconds)
    hits = rate_limit_store[ip]

    if len(hits) >= max_requests:
        retry_after = max(1, math.ceil(hits[0] + window_seconds - now))
        logger.warning(f"Rate limit hit: ip={ip}, requests={len(hits)}, window={window_seconds}s")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many requests. Try again in {retry_after} seconds.",
            headers={"Retry-After": str(retry_after)},
        )

    hits.append(now)


def rate_limited(request: Request) -> None:
    """Route dependency using the configured limit."""
    check_rate_limit(request)
