# /gradebook/core/errors.py

"""
Domain exceptions raised by the service layer, and the global handler that
turns anything unexpected into a logged HTTP 500.

The service layer signals expected failures with `ValueError` subclasses;
routers translate them into 4xx responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RecordNotFoundError(ValueError):
    """A student, section, group or run does not exist."""


class DuplicateRunError(ValueError):
    """A run with the same name has already been imported."""


class RunFileError(ValueError):
    """A .RUN / .GRP / .SEC file is missing or malformed."""


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": f"Error handling {request.method} {request.url.path}",
                "error": str(exc),
            },
        )
