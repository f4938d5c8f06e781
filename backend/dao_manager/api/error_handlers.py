"""Error Handlers — map every failure of a dossier request to the JSON error envelope.

Invariants:
    - DaoManagerError → its own http_status and to_response() body; 5xx logged at
      ERROR, 4xx at WARNING, both tagged with dao_id
    - RequestValidationError (bad request body/params) and pydantic ValidationError
      (a merged task/member that no longer validates) → 400 VALIDATION_ERROR
    - Exception (catch-all) → 500, never leaks internal details
"""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from dao_manager.core.errors import DaoManagerError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DaoManagerError, _dao_manager_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _generic_error_handler)


async def _dao_manager_error_handler(request: Request, exc: DaoManagerError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "dao_id": exc.context.dao_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def _validation_error_handler(
    request: Request, exc: RequestValidationError | ValidationError,
):
    errors = exc.errors()
    logger.warning(
        f"Validation error: {len(errors)} field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_validation_envelope(errors),
    )


async def _generic_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _validation_envelope(errors: Sequence[dict[str, Any]]) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }
