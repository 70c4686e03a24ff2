# likert_app/schemas/responses.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt

BasicInfoAnswers = Dict[str, str]
SectionAnswers = Dict[str, Dict[str, int]]
# entrada: true/false no cuentan como puntaje
SectionAnswersIn = Dict[str, Dict[str, StrictInt]]


# ---------- Entradas ----------

class ResponseIn(BaseModel):
    basic_info: BasicInfoAnswers = Field(default_factory=dict)
    section_answers: SectionAnswersIn = Field(default_factory=dict)


class AnswerCheckIn(BaseModel):
    """Respuesta candidata (pregunta Q de la sección S = value) sobre el borrador actual."""
    section_id: str
    question_id: str
    value: StrictInt
    section_answers: SectionAnswersIn = Field(default_factory=dict)
    basic_info: BasicInfoAnswers = Field(default_factory=dict)


class BulkDeleteIn(BaseModel):
    ids: List[UUID] = Field(min_length=1)


# ---------- Salidas ----------

class ResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    survey_id: UUID
    basic_info: BasicInfoAnswers = Field(default_factory=dict)
    section_answers: SectionAnswers = Field(default_factory=dict)
    created_at: datetime


class NoticeOut(BaseModel):
    message: str
    expires_in_seconds: float


class AnswerCheckOut(BaseModel):
    accepted: bool
    section_answers: SectionAnswers
    progress: int
    warning: Optional[NoticeOut] = None


class BulkDeleteFailure(BaseModel):
    id: UUID
    detail: str


class BulkDeleteOut(BaseModel):
    deleted: List[UUID] = Field(default_factory=list)
    failed: List[BulkDeleteFailure] = Field(default_factory=list)
