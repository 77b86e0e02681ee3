"""API error responses

ClientError carries a use case Error to the exception handlers, which render
every failure as {"error": {"code", "message"}}.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from invoice_lifecycle.libs.result import Error

logger = logging.getLogger(__name__)

# Error code -> HTTP status for codes that are not 400
ERROR_STATUS_CODES = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOTIFICATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "CONCURRENT_UPDATE": status.HTTP_409_CONFLICT,
    "PERSISTENCE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    @classmethod
    def from_error(cls, error: Error) -> "ClientError":
        """ClientError with the status registered for the error code"""
        if error.code.endswith("_FAILED"):
            return cls(error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return cls(error, status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST))


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error.code, exc.error.message),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(loc) for loc in first.get("loc", ()) if loc not in ("body", "query", "path"))
    message = f"Invalid {field}: {first.get('msg', 'invalid request')}" if field else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", message),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
