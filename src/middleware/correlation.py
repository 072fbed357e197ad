"""Request Correlation ID Middleware.

Every request gets a correlation ID that is:
- Taken from the X-Correlation-ID request header, or generated
- Stored in a context variable for the lifetime of the request
- Stamped onto every log record via CorrelationIdFilter
- Echoed back in the X-Correlation-ID and X-Request-ID response headers
- Used as the request_id of error responses

Usage:
    app.add_middleware(CorrelationIdMiddleware)
    configure_correlation_logging(logging.INFO)
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar, Token
from typing import Any, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


_correlation_id_ctx: ContextVar[Optional[str]] = ContextVar(
    "correlation_id",
    default=None,
)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

DEFAULT_LOG_FORMAT = (
    "%(asctime)s [%(correlation_id)s] %(levelname)s "
    "%(name)s: %(message)s"
)

# Incoming IDs longer than this are replaced rather than echoed
MAX_CORRELATION_ID_LENGTH = 128


def get_correlation_id() -> Optional[str]:
    """Correlation ID for the current context, or None outside a request."""
    return _correlation_id_ctx.get()


def set_correlation_id(correlation_id: Optional[str]) -> Token[Optional[str]]:
    """Set the correlation ID; returns a token for reset_correlation_id."""
    return _correlation_id_ctx.set(correlation_id)


def reset_correlation_id(token: Token[Optional[str]]) -> None:
    _correlation_id_ctx.reset(token)


class correlation_id_context:
    """Context manager for code running outside a request (CLI, scripts).

    Usage:
        with correlation_id_context() as cid:
            logger.info("seeding tasks")
    """

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._token: Optional[Token[Optional[str]]] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            reset_correlation_id(self._token)


def _is_usable(candidate: Optional[str]) -> bool:
    return bool(candidate) and len(candidate) <= MAX_CORRELATION_ID_LENGTH and candidate.isprintable()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to each request and its response."""

    def __init__(
        self,
        app,
        header_name: str = CORRELATION_ID_HEADER,
        generator: Optional[Callable[[], str]] = None,
    ):
        super().__init__(app)
        self.header_name = header_name
        self.generator = generator or (lambda: str(uuid.uuid4()))

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        correlation_id = request.headers.get(self.header_name)
        if not _is_usable(correlation_id):
            correlation_id = self.generator()

        token = set_correlation_id(correlation_id)

        try:
            request.state.correlation_id = correlation_id

            response = await call_next(request)

            response.headers[self.header_name] = correlation_id
            response.headers[REQUEST_ID_HEADER] = correlation_id

            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={"status_code": response.status_code},
            )
            return response

        finally:
            reset_correlation_id(token)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds ``correlation_id`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_correlation_logging(
    level: int | str = logging.INFO,
    log_format: Optional[str] = None,
) -> logging.Handler:
    """Install a root stream handler whose format includes the correlation ID.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Logging level (name or number).
        log_format: Custom log format (must include %(correlation_id)s).

    Returns:
        The installed handler.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(log_format or DEFAULT_LOG_FORMAT))
    handler.setLevel(level)
    handler.set_name("correlation")

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == "correlation":
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler
