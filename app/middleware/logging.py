import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

QUIET_PATHS = {"/health"}

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs its outcome and latency."""

    async def dispatch(self, request: Request, call_next):
        # Honour an id set by a proxy so traces line up across hops
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{request_id}] {method} {path} from {client} failed after "
                f"{(time.perf_counter() - started) * 1000:.1f}ms"
            )
            raise

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING
        elif path in QUIET_PATHS:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            f"[{request_id}] {method} {path} - {response.status_code} ({duration_ms}ms)",
            extra={"request_id": request_id, "client": client, "status_code": response.status_code, "duration_ms": duration_ms}
        )

        response.headers["X-Request-ID"] = request_id
        return response
