from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.services.product_store import ConstraintViolation

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors to "field: message; field: message"."""
    parts = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts) or "Malformed request"


async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc)
    logger.warning(f"{request.method} {request.url.path} malformed: {message}")
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


def register_exception_handlers(app: FastAPI) -> None:
    """Every error response carries an {"error": message} body."""
    app.add_exception_handler(ConstraintViolation, constraint_violation_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
