from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from suiteflow.domain.exceptions import (
    ConflictError,
    DomainError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from suiteflow.domain.execution import SuiteFanOutError


def configure_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        status_code = _map_to_status_code(exc)
        content: dict[str, Any] = {"detail": exc.message, "type": type(exc).__name__}
        if isinstance(exc, SuiteFanOutError):
            content["created"] = exc.created
            content["intended"] = exc.intended
        return JSONResponse(status_code=status_code, content=content)


def _map_to_status_code(exc: DomainError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, (ConflictError, InvalidStateError)):
        return 409
    if isinstance(exc, InfrastructureError):
        return 503
    return 500
