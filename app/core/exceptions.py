# app/core/exceptions.py
"""
Taxonomía de errores de la API.

Los validadores devuelven un ``Rejection`` clasificado; los servicios lo
convierten en ``ServiceError`` (HTTPException con su ``ErrorKind``) y los
handlers registrados aquí lo renderizan como ``ErrorResponse``.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    RELATIONSHIP_CONFLICT = "relationship_conflict"
    INTERNAL_FAILURE = "internal_failure"


STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.RELATIONSHIP_CONFLICT: 409,
    ErrorKind.INTERNAL_FAILURE: 500,
}

KIND_BY_STATUS = {
    400: ErrorKind.INVALID_INPUT,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.INVALID_INPUT,
}


@dataclass(frozen=True)
class Rejection:
    """Motivo de rechazo clasificado de una validación"""
    kind: ErrorKind
    message: str
    field: Optional[str] = None

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def as_http_exception(self) -> "ServiceError":
        details = {"field": self.field} if self.field else None
        return ServiceError(self.kind, self.message, details=details)


class ServiceError(HTTPException):
    """HTTPException que conserva el tipo de error de negocio"""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=STATUS_BY_KIND[kind], detail=message)
        self.kind = kind
        self.details = details


def internal_failure(message: str = "Error interno del servidor") -> ServiceError:
    return ServiceError(ErrorKind.INTERNAL_FAILURE, message)


def _error_json(status_code: int, kind: ErrorKind, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=kind.value, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = getattr(exc, "kind", None) or KIND_BY_STATUS.get(exc.status_code)
    if kind is None:
        kind = ErrorKind.INVALID_INPUT if exc.status_code < 500 else ErrorKind.INTERNAL_FAILURE
    message = exc.detail if isinstance(exc.detail, str) else "Error procesando la solicitud"
    return _error_json(exc.status_code, kind, message, getattr(exc, "details", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return _error_json(400, ErrorKind.INVALID_INPUT, "Datos de entrada inválidos", {"errors": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    return _error_json(500, ErrorKind.INTERNAL_FAILURE, "Error interno del servidor")


def setup_exception_handlers(app: FastAPI):
    """Registrar los handlers de error de la aplicación"""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
