# likert_app/models/survey.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from likert_app.db.base_class import Base

# JSONB en Postgres, JSON genérico en SQLite (tests)
JSONDoc = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Survey(Base):
    """
    Definición de una encuesta. Las preguntas de información básica y las
    secciones se guardan como documentos JSON en la misma fila.
    """

    __tablename__ = "surveys"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    basic_info_questions = Column(JSONDoc, nullable=False, default=list)
    sections = Column(JSONDoc, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # el borrado en cascada lo hace la BD (ON DELETE CASCADE)
    responses = relationship("Response", back_populates="survey", passive_deletes=True)


class Response(Base):
    __tablename__ = "responses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    survey_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    basic_info = Column(JSONDoc, nullable=False, default=dict)       # {question_id: "texto"}
    section_answers = Column(JSONDoc, nullable=False, default=dict)  # {section_id: {question_id: 1..5}}

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    survey = relationship("Survey", back_populates="responses")
