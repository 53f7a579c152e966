"""Service-level error taxonomy and its mapping onto HTTP responses.

Services raise these instead of ``HTTPException`` so the same code can be
driven from tests, scripts and the HTTP layer. Every handler answers with the
``{"detail": <message>}`` body FastAPI uses for its own errors.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

_LOG = logging.getLogger("ncr_tracker.errors")

STORAGE_FAILURE_MESSAGE = "Database operation failed"


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Caller-correctable input problem; the message is shown as is."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class StorageError(ServiceError):
    """Query execution failed. ``message`` carries the driver detail for logs."""

    status_code = 500


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        _LOG.info("validation_error path=%s detail=%s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError):
        _LOG.error("storage_error path=%s detail=%s", request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": STORAGE_FAILURE_MESSAGE})
