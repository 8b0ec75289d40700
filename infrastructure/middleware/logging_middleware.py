import time
import uuid
import logging
import contextvars
from typing import Optional, Set, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from infrastructure.utils.logging_config import logger

REQUEST_ID_HEADER = "X-Request-ID"

# --- Context Variable for Request ID ---
request_id_contextvar = contextvars.ContextVar[Optional[str]]("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Helper function to retrieve the current request ID from context."""
    return request_id_contextvar.get()


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and its response status and duration.

    Reuses the caller's ``X-Request-ID`` when present (otherwise generates one),
    exposes it on ``request.state.request_id`` and echoes it in the response.
    Upload bodies are never logged, only headers (sensitive ones redacted).
    """
    def __init__(self, app: ASGIApp, exclude_headers: Optional[Set[str]] = None):
        super().__init__(app)
        default_exclude = {'authorization', 'cookie', 'x-api-key', 'proxy-authorization'}
        self.exclude_headers = default_exclude.union(
            {h.lower() for h in exclude_headers} if exclude_headers else set()
        )

    def _redact(self, headers) -> Dict[str, str]:
        return {k: "[REDACTED]" if k.lower() in self.exclude_headers else v for k, v in headers.items()}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request_id_token = request_id_contextvar.set(request_id)
        request.state.request_id = request_id

        start_time = time.monotonic()
        log_extra_request = {
            "request_id": request_id,
            "http.request.method": request.method,
            "http.request.url": str(request.url),
            "http.request.headers": self._redact(request.headers),
            "network.client.ip": request.client.host if request.client else "unknown",
        }
        logger.info(f"--> {request.method} {request.url.path}", extra=log_extra_request)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            logger.exception("Unhandled exception during request processing",
                             extra={**log_extra_request, "exception_type": type(e).__name__})
            raise
        finally:
            process_time = (time.monotonic() - start_time) * 1000
            log_level = logging.WARNING if 400 <= status_code < 500 else logging.ERROR if status_code >= 500 else logging.INFO
            logger.log(
                log_level,
                f"<-- {status_code} ({request.method} {request.url.path}) [{process_time:.2f}ms]",
                extra={"request_id": request_id, "http.response.status_code": status_code,
                       "duration_ms": round(process_time, 2)},
            )
            request_id_contextvar.reset(request_id_token)


class RequestIdLogFilter(logging.Filter):
    """Injects the current request ID into every log record."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_contextvar.get(None)  # type: ignore[attr-defined]
        return True
