from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.requests import Request

from ...core.logger import get_logger
from ...crud.errors import StoreError, NotFoundError, InvalidRequestError

logger = get_logger(__name__)

# Store error kinds with a dedicated status; everything else is a 500
STORE_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
}

STATUS_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: "Invalid request",
    status.HTTP_404_NOT_FOUND: "Prompt not found",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal server error",
}


class PromptError(Exception):
    """Base exception for prompt-related HTTP errors"""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, **kwargs):
        self.message = message
        self.status_code = status_code
        self.details = kwargs or {}
        super().__init__(message)


class PromptNotFoundError(PromptError):
    """Raised when a prompt is not found"""
    def __init__(self, message: str = "Prompt not found", **kwargs):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, **kwargs)


class PromptValidationError(PromptError):
    """Raised when the request body or query parameters are malformed"""
    def __init__(self, message: str = "Invalid request data", **kwargs):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, **kwargs)


def status_for(exc: StoreError) -> int:
    for error_type, status_code in STORE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def http_error_handler(request: Request, exc: PromptError) -> JSONResponse:
    """Convert custom exceptions to HTTP responses"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.message,
            "status_code": exc.status_code,
            **exc.details
        }
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Map store failures to a status code; the underlying detail only goes to the log"""
    status_code = status_for(exc)
    logger.error(
        f"{type(exc).__name__} for request {request.method} {request.url}: {exc.message}"
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "message": STATUS_MESSAGES[status_code],
            "status_code": status_code,
        }
    )
