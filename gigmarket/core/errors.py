from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """
    Typed failure raised by the service layer.

    Each subclass carries the HTTP status the boundary should answer with.
    `code` is the stable machine-readable kind, `message` is safe to show.
    """

    status_code = 400
    code = "SERVICE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class BadRequest(ServiceError):
    status_code = 400
    code = "BAD_REQUEST"


class Unauthorized(ServiceError):
    status_code = 401
    code = "UNAUTHORIZED"


class Forbidden(ServiceError):
    status_code = 403
    code = "FORBIDDEN"


class NotFound(ServiceError):
    """
    Also used for ownership failures so callers cannot probe for existence.
    `reason` keeps the real cause ("missing", "forbidden", "not_pending",
    "inactive") for logs and tests; it is never serialized.
    """

    status_code = 404
    code = "NOT_FOUND"

    def __init__(
        self,
        message: str,
        reason: str = "missing",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.reason = reason


class Conflict(ServiceError):
    status_code = 409
    code = "CONFLICT"


def error_body(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        },
    }


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        rid = getattr(request.state, "request_id", None)
        logger.info(
            "service error",
            extra={
                "request_id": rid,
                "code": exc.code,
                "reason": getattr(exc, "reason", None),
                "path": request.url.path,
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        logger.exception("unhandled error", extra={"request_id": rid, "path": request.url.path})
        return JSONResponse(
            status_code=500,
            content=error_body("SERVER_ERROR", "Internal server error"),
        )
