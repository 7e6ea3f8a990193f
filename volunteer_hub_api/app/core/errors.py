"""
Error taxonomy and HTTP mapping.

Services raise the exceptions defined here and never build HTTP
responses themselves.  ``register_exception_handlers`` installs handlers
on the FastAPI application that translate each exception into a JSON
body of the form ``{"error": "<message>"}`` with the status code the
exception carries.  Malformed request bodies and query parameters are
reported as 400 in the same shape.  Store faults and anything unexpected become a
generic 500 response; the details only go to the server log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError


logger = logging.getLogger(__name__)


class VolunteerHubError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(VolunteerHubError):
    """A required field is missing or has an unusable value."""


class InvalidIdError(VolunteerHubError):
    """An identifier is not a well-formed document id."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid id: {value!r}")
        self.value = value


class NotFoundError(VolunteerHubError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(VolunteerHubError):
    """The caller-asserted email does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class CapacityExhaustedError(VolunteerHubError):
    """The post has no open volunteer slots left."""


class DuplicateRegistrationError(VolunteerHubError):
    """The volunteer is already registered for the post."""


class NoChangeError(VolunteerHubError):
    """An update matched the document but changed nothing."""


async def _volunteer_hub_error_handler(request: Request, exc: VolunteerHubError) -> JSONResponse:
    logger.info(
        "%s %s rejected with %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg', 'Invalid value')}" if location else error.get("msg", "Invalid value"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Malformed request"},
    )


async def _store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(
        "Store error while handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception while handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy handlers to ``app``."""
    app.add_exception_handler(VolunteerHubError, _volunteer_hub_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(PyMongoError, _store_error_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
