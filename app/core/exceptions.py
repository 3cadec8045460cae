import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors rendered as `{error, message}` JSON payloads."""

    status_code = 500

    def __init__(self, error: str, message: Optional[str] = None, **extra: Any):
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.extra = extra

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        body.update(self.extra)
        return body


class BadRequest(ServiceError):
    status_code = 400


class ValidationFailed(ServiceError):
    """Input rejected before any persistence; carries field-level messages."""

    status_code = 400

    def __init__(self, details: List[str], error: str = "Validation failed"):
        super().__init__(error)
        self.details = details

    def payload(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details}


class NotFound(ServiceError):
    status_code = 404


class Forbidden(ServiceError):
    status_code = 403


class Conflict(ServiceError):
    status_code = 409


class InternalError(ServiceError):
    status_code = 500

    def __init__(self, message: str):
        super().__init__("Internal server error", message)


def format_errors(errors) -> List[str]:
    """Flatten pydantic error dicts into `"field: message"` strings."""
    messages = []
    for err in errors:
        # Drop the request-part prefix FastAPI adds ("body", "query", "path")
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": format_errors(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "An unexpected error occurred"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
