from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

SUMMARY_FAILED = "Failed to generate summary."
EMAIL_FAILED = "Failed to send email."
INVALID_BODY = "Invalid request body."


class InputValidationError(ValueError):
    """Missing or insufficient input. The message is safe to show to the caller."""


class UpstreamError(RuntimeError):
    """Generation service, mail relay or file I/O failed. Only a generic message is returned."""


def error_body(message: str) -> dict:
    return {"error": message}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(error_body(str(exc.detail)), status_code=exc.status_code, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(error_body(INVALID_BODY), status_code=400)
