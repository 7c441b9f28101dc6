"""Engine exceptions and the FastAPI handlers that render them.

Every error leaves the API in the same envelope:

    {"error": {"code": "...", "message": "...", "details": {...}}}
"""

import logging
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SpoilageEngineError(Exception):
    """Base exception for scoring and lifecycle errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class InvalidConfigurationError(SpoilageEngineError):
    """The batch cannot be scored as given (e.g. non-positive shelf life).

    Fatal to the evaluation; never replaced by a default.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_CONFIGURATION",
            details={"field": field} if field else None,
        )
        self.field = field


class InvalidTransitionError(SpoilageEngineError):
    """Lifecycle transition attempted from a state that does not allow it."""

    def __init__(self, batch_id: str, current_status: str, attempted_status: str):
        super().__init__(
            message=(
                f"Batch {batch_id} cannot move from '{current_status}' "
                f"to '{attempted_status}'"
            ),
            status_code=status.HTTP_409_CONFLICT,
            error_code="INVALID_TRANSITION",
            details={
                "batch_id": batch_id,
                "current_status": current_status,
                "attempted_status": attempted_status,
            },
        )
        self.batch_id = batch_id
        self.current_status = current_status
        self.attempted_status = attempted_status


def create_error_response(
    status_code: int,
    message: str,
    error_code: str,
    details: dict | None = None,
) -> JSONResponse:
    """Render the error envelope shared by every handler.

    ``details`` is omitted when there is nothing to add.
    """
    error = {"code": error_code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


async def engine_exception_handler(
    request: Request,
    exc: SpoilageEngineError,
) -> JSONResponse:
    """Scoring and lifecycle failures carry their own status and code."""
    logger.warning(
        "%s %s rejected: %s (%s)",
        request.method,
        request.url.path,
        exc.message,
        exc.error_code,
    )

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the common envelope."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed with HTTP %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
        )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
    )


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError],
) -> JSONResponse:
    """Malformed batch or request payloads.

    Each pydantic error becomes a ``{field, message, type}`` entry, with the
    location path joined by ``->`` (e.g. ``body -> batch -> entry_date``).
    """
    errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        "%s %s: %d invalid field(s)", request.method, request.url.path, len(errors)
    )

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code="VALIDATION_ERROR",
        details={"errors": errors},
    )


async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Anything else is a bug; log it with the traceback, return a generic 500."""
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Internal error while processing the request.",
        error_code="INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    """Install the envelope handlers on ``app``."""
    app.add_exception_handler(SpoilageEngineError, engine_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
