# shared/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class SchoolLocatorError(Exception):
    """Base class for errors raised by this service."""


class InvalidRequest(SchoolLocatorError):
    """Client input rejected before any storage access."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(InvalidRequest):
    pass


class TypeMismatch(InvalidRequest):
    pass


class OutOfRange(InvalidRequest):
    pass


class ParseError(InvalidRequest):
    pass


class StorageError(SchoolLocatorError):
    """Backend failure. The cause is chained and never shown to clients."""


class ConfigurationError(SchoolLocatorError):
    pass


async def invalid_request_handler(request: Request, exc: InvalidRequest):
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidRequest, invalid_request_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
