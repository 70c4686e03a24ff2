# likert_app/services/storage.py
"""
Acceso a las colecciones ``surveys`` y ``responses``.

``SurveyStore`` envuelve la sesión SQLAlchemy de la petición y se inyecta en
los endpoints con ``Depends(get_store)``; en tests basta con sobreescribir
``get_db``. Los errores de BD se convierten en ``StorageError`` tras hacer
rollback.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from likert_app.core.errors import StorageError
from likert_app.db.session import get_db
from likert_app.models.survey import Response, Survey

logger = logging.getLogger(__name__)


class SurveyStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("[DB] %s falló: %s", action, e)
            raise StorageError() from e

    # -------------------- surveys -------------------- #

    def list_surveys(self) -> list[tuple[Survey, int]]:
        """Encuestas (más recientes primero) con su número de respuestas."""
        with self._guard("list_surveys"):
            rows = (
                self.db.query(Survey, func.count(Response.id))
                .outerjoin(Response, Response.survey_id == Survey.id)
                .group_by(Survey.id)
                .order_by(Survey.created_at.desc())
                .all()
            )
        return [(s, int(n or 0)) for s, n in rows]

    def get_survey(self, survey_id: UUID) -> Optional[Survey]:
        with self._guard("get_survey"):
            return self.db.query(Survey).filter(Survey.id == survey_id).first()

    def count_responses(self, survey_id: UUID) -> int:
        with self._guard("count_responses"):
            return int(
                self.db.query(func.count(Response.id))
                .filter(Response.survey_id == survey_id)
                .scalar()
                or 0
            )

    def create_survey(self, data: dict[str, Any]) -> Survey:
        survey = Survey(**data)
        with self._guard("create_survey"):
            self.db.add(survey)
            self.db.commit()
            self.db.refresh(survey)
        return survey

    def update_survey(self, survey: Survey, data: dict[str, Any]) -> Survey:
        for key, value in data.items():
            setattr(survey, key, value)
        with self._guard("update_survey"):
            self.db.add(survey)
            self.db.commit()
            self.db.refresh(survey)
        return survey

    def delete_survey(self, survey_id: UUID) -> bool:
        # las respuestas caen por ON DELETE CASCADE
        with self._guard("delete_survey"):
            deleted = (
                self.db.query(Survey)
                .filter(Survey.id == survey_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        return bool(deleted)

    # -------------------- responses -------------------- #

    def list_responses(self, survey_id: UUID) -> list[Response]:
        with self._guard("list_responses"):
            return (
                self.db.query(Response)
                .filter(Response.survey_id == survey_id)
                .order_by(Response.created_at.desc())
                .all()
            )

    def get_response(self, response_id: UUID) -> Optional[Response]:
        with self._guard("get_response"):
            return self.db.query(Response).filter(Response.id == response_id).first()

    def create_response(self, survey_id: UUID, basic_info: dict, section_answers: dict) -> Response:
        response = Response(survey_id=survey_id, basic_info=basic_info, section_answers=section_answers)
        with self._guard("create_response"):
            self.db.add(response)
            self.db.commit()
            self.db.refresh(response)
        return response

    def delete_response(self, response_id: UUID) -> bool:
        with self._guard("delete_response"):
            deleted = (
                self.db.query(Response)
                .filter(Response.id == response_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        return bool(deleted)


def get_store(db: Session = Depends(get_db)) -> SurveyStore:
    """Dependency para FastAPI"""
    return SurveyStore(db)
