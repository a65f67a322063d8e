"""Domain errors and their HTTP rendering.

Services raise these; the API layer never has to translate them by hand
because ``register_error_handlers`` maps each one onto a status code and the
``{"error": ..., "message": ...}`` detail shape used across the API.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StocMedError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class InvalidArgument(StocMedError):
    """Caller supplied an empty or malformed required field."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_argument"


class Unauthenticated(StocMedError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class NotFound(StocMedError):
    """Expected absence. Callers branch on it, it is not an incident."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class Conflict(StocMedError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class PharmacyConflict(Conflict):
    """Another request already created the pharmacy for this account."""


class UpstreamUnavailable(StocMedError):
    """The backing store failed or timed out. Transient, caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "upstream_unavailable"


async def stocmed_error_handler(request: Request, exc: StocMedError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"error": exc.code, "message": exc.message}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StocMedError, stocmed_error_handler)
