# products_api/errors.py

"""
Exception handlers that render every failure in the response envelope:
`{"error": ...}` for single errors and `{"errors": [...]}` for validation.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .validation import InputValidationError

logger = logging.getLogger(__name__)

INVALID_JSON = "JSON no valido"
INTERNAL_ERROR = "Error interno del servidor"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def input_validation_handler(request: Request, exc: InputValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": exc.errors},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Body parsing failures: malformed JSON or a body that is not a JSON object."""
    errors = []
    for err in exc.errors():
        errors.append(
            {
                "type": "field",
                "msg": INVALID_JSON if err.get("type") == "json_invalid" else err.get("msg"),
                "path": ".".join(str(part) for part in err.get("loc", ())),
                "location": "body",
            }
        )
    logger.warning(f"Rejected request body on {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        f"Database error while handling {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(InputValidationError, input_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
