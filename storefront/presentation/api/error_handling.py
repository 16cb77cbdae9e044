from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import InternalError, ServiceError

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"error": True, "message": message}
    if payload:
        content.update(payload)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for item in exc.errors():
        location = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        message = str(item.get("msg", "Invalid value"))
        errors.append({"field": ".".join(location), "message": message.removeprefix("Value error, ")})
    return errors


def register_exception_handlers(app: FastAPI, expose_error_details: bool = False) -> None:
    """Install one JSON envelope for every error the API can produce."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        log_fn = logger.error if exc.status_code >= 500 else logger.info
        log_fn("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message, exc.payload)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _validation_errors(exc)
        message = errors[0]["message"] if len(errors) == 1 else "Validation failed"
        if len(errors) == 1 and errors[0]["field"]:
            message = f"{errors[0]['field']}: {message}"
        return _error_response(400, message, {"errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return _error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        error = InternalError(payload={"detail": str(exc)} if expose_error_details else None)
        return _error_response(error.status_code, error.message, error.payload)
