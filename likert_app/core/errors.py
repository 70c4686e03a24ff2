# likert_app/core/errors.py
"""
Errores de dominio de la API.

Cada error lleva su status HTTP y un código estable; el handler registrado en
``likert_app.main`` los convierte en ``{"detail": ..., "code": ...}``.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_STORAGE_MESSAGE = "No se pudo completar la operación. Intenta de nuevo."


class DomainError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class UnauthorizedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"

    def __init__(self, detail: str = "No autorizado"):
        super().__init__(detail)


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"

    def __init__(self, detail: str = "Solo administradores"):
        super().__init__(detail)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class SurveyValidationError(DomainError):
    status_code = 422
    code = "validation_error"

    def __init__(self, detail: str, field: str | None = None):
        super().__init__(detail)
        self.field = field


class CapExceededError(SurveyValidationError):
    code = "cap_exceeded"

    def __init__(self, detail: str, *, section_id: str, value: int, cap: int):
        super().__init__(detail, field=section_id)
        self.section_id = section_id
        self.value = value
        self.cap = cap


class SurveyLockedError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "survey_locked"

    def __init__(self, detail: str = "La encuesta ya tiene respuestas y no puede modificarse"):
        super().__init__(detail)


class StorageError(DomainError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_error"

    def __init__(self, detail: str = GENERIC_STORAGE_MESSAGE):
        super().__init__(detail)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    body = {"detail": exc.detail, "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
