"""Error taxonomy shared by both resources and its HTTP mapping.

Every failure leaves the API as `{"message": <detail>}` with the status code
carried by the exception class.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from orderdesk.common.logging import logger


class ApiError(Exception):
    """Base class for errors that map onto one HTTP status."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Missing fields, duplicate keys, malformed ids, rejected writes."""

    status_code = 400


class StorageError(ApiError):
    """Document store unreachable or failing on a read path."""

    status_code = 500


class PaymentAbandoned(ApiError):
    """Pending settlement was cancelled before it wrote anything."""

    status_code = 503


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "validation failed: " + "; ".join(parts)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed path=%s status=%s error=%s", request.url.path, exc.status_code, exc.message)
    else:
        logger.warning("request_rejected path=%s status=%s error=%s", request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation(exc)
    logger.warning("request_rejected path=%s status=400 error=%s", request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


def register_error_handlers(app: FastAPI) -> None:
    """Attach the `{message}` error contract to an application."""

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
