"""
Fauna API: Request Deadline Middleware
=========================================

What:  Gives every request a deadline that bounds its document-store calls.
How:   Reads the optional X-Request-Timeout header (seconds), falls back to
       settings.request_timeout_seconds, caps the value at
       settings.request_timeout_max_seconds and stores the absolute deadline
       (time.monotonic() based) in a ContextVar.
Who:   database.operation_deadline() reads the remaining budget and hands it
       to pymongo.timeout() around each store call.

Header handling:
    X-Request-Timeout: 2.5   → store calls of this request share a 2.5s budget
    X-Request-Timeout: abc   → ignored, default budget applies
    (absent)                 → default budget applies
"""

import logging
import time
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fauna_api.config import settings

logger = logging.getLogger(__name__)

TIMEOUT_HEADER = "X-Request-Timeout"

# Smallest budget handed to the driver. pymongo treats 0 as "no timeout",
# so an exhausted deadline must still map to a positive value.
MIN_REMAINING_SECONDS = 0.001

# Absolute monotonic deadline of the current request (None outside a request)
request_deadline_var: ContextVar[Optional[float]] = ContextVar("request_deadline", default=None)


def resolve_timeout(header_value: Optional[str]) -> float:
    """Turn the raw header value into the request budget in seconds."""
    budget = settings.request_timeout_seconds
    if header_value:
        try:
            requested = float(header_value)
        except ValueError:
            logger.debug("Ignoring malformed %s header: %r", TIMEOUT_HEADER, header_value)
        else:
            if requested > 0:
                budget = requested
    return min(budget, settings.request_timeout_max_seconds)


def remaining_seconds() -> float:
    """
    Seconds left before the current request's deadline.

    Outside a request (startup tasks, scripts, unit tests calling services
    directly) the default budget is returned.
    """
    deadline = request_deadline_var.get()
    if deadline is None:
        return settings.request_timeout_seconds
    return max(deadline - time.monotonic(), MIN_REMAINING_SECONDS)


class RequestDeadlineMiddleware(BaseHTTPMiddleware):
    """Stamps each request with an absolute deadline for its store calls."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        budget = resolve_timeout(request.headers.get(TIMEOUT_HEADER))
        request_deadline_var.set(time.monotonic() + budget)
        request.state.timeout_seconds = budget
        return await call_next(request)
