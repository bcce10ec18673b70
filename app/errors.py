# app/errors.py
"""
API error types and the FastAPI exception handlers that render them.

Every failure reaching the client has one of these shapes:

    400  {"errors": [{"field": ..., "message": ..., "type": ...}, ...]}
    404  {"error": "..."}
    409  {"error": "..."}
    500  {"error": "Internal server error"}
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.db.engine import DatabaseError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("Validation failed")
        self.errors = errors

    def body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        # loc looks like ("body", "email") or ("path", "customer_id")
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        errors.append(
            {
                "field": field,
                "location": loc[0] if loc else None,
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
        )
    return errors


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await api_error_handler(request, ValidationError(_field_errors(exc)))


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error(
        "Database error on %s %s (%s)",
        request.method,
        request.url.path,
        exc.code,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=InternalError.status_code,
        content=InternalError().body(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
