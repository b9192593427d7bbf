"""Request Context Middleware: request ids and access logging.

Invariants:
    - Every response carries X-Request-ID (echoed from the request or generated),
      including the 500 built for an unhandled exception
    - One access log line per request with method, path, status and duration
"""

import logging
import time
import uuid

from fastapi import FastAPI, Request

from crud_api.api.error_handlers import internal_error_response

logger = logging.getLogger("crud_api.access")

REQUEST_ID_HEADER = "X-Request-ID"


def register_request_context(app: FastAPI) -> None:

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        req_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = req_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.url.path}: {exc}",
                exc_info=True,
                extra={"request_id": req_id, "error_code": "INTERNAL_ERROR"},
            )
            response = internal_error_response()
        response.headers[REQUEST_ID_HEADER] = req_id
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
            },
        )
        return response
