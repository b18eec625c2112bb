from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    code: str


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(code="bad_request", message=message, status_code=400)


class InvalidRangeError(AppError):
    def __init__(self, message: str = "Invalid date range") -> None:
        super().__init__(code="invalid_range", message=message, status_code=400)


class InvalidStationError(AppError):
    def __init__(self, message: str = "Station has no stripe_id configured.") -> None:
        super().__init__(code="invalid_station", message=message, status_code=400)


class ConfigurationMissingError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(code="configuration_missing", message=message, status_code=503)


class UpstreamUnavailableError(AppError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(
            code="upstream_unavailable",
            message=message,
            status_code=status_code or 500,
        )


def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    envelope = ErrorEnvelope(error=exc.message, code=exc.code)
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "query")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    envelope = ErrorEnvelope(
        error="; ".join(messages) or "Validation error",
        code="validation_error",
    )
    return JSONResponse(status_code=400, content=envelope.model_dump())
