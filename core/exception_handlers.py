import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import (
    EmailAlreadyExistsError,
    InvalidAgeError,
    InvalidDateRangeError,
    PhoneNumberAlreadyExistsError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from .response import error_body, message_body

logger = logging.getLogger(__name__)


def _request_validation_details(exc: RequestValidationError) -> dict[str, str]:
    """Flatten FastAPI's error list into field -> message (first message wins)."""
    details: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        # drop the "body" / "query" / "path" prefix when there is a field after it
        field = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "request")
        details.setdefault(field, err.get("msg", "Invalid value"))
    return details


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ResourceNotFoundError)
    async def not_found_handler(request: Request, exc: ResourceNotFoundError):
        return JSONResponse(status_code=404, content=message_body(exc.message))

    @app.exception_handler(InvalidAgeError)
    async def invalid_age_handler(request: Request, exc: InvalidAgeError):
        return JSONResponse(status_code=400, content=message_body(exc.message))

    @app.exception_handler(InvalidDateRangeError)
    async def invalid_date_range_handler(request: Request, exc: InvalidDateRangeError):
        return JSONResponse(status_code=400, content=message_body(exc.message))

    @app.exception_handler(EmailAlreadyExistsError)
    @app.exception_handler(PhoneNumberAlreadyExistsError)
    async def conflict_handler(request: Request, exc):
        return JSONResponse(status_code=409, content=error_body(409, exc.message))

    @app.exception_handler(ValidationFailedError)
    async def validation_failed_handler(request: Request, exc: ValidationFailedError):
        return JSONResponse(status_code=400, content=error_body(400, exc.errors))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error_body(400, _request_validation_details(exc)))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content=message_body(str(exc.detail)))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=message_body("Internal server error"))
