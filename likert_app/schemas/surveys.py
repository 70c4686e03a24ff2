# likert_app/schemas/surveys.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ---------- Información básica (unión etiquetada por "type") ----------

class TextQuestion(BaseModel):
    id: Optional[str] = None
    label: str
    type: Literal["text"] = "text"


class SelectQuestion(BaseModel):
    id: Optional[str] = None
    label: str
    type: Literal["select"]
    options: List[str] = Field(default_factory=list)


BasicInfoQuestion = Annotated[Union[TextQuestion, SelectQuestion], Field(discriminator="type")]


# ---------- Secciones puntuadas ----------

class SurveyQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    text: str
    # Se guarda y se devuelve, pero no se aplica al puntaje
    is_reverse_coded: bool = Field(default=False, alias="isReverseCoded")


class SurveySection(BaseModel):
    id: Optional[str] = None
    title: str
    max_five_points: int = Field(0, description="Máximo de preguntas con 5 (0 = sin límite)")
    max_one_points: int = Field(0, description="Máximo de preguntas con 1 (0 = sin límite)")
    questions: List[SurveyQuestion] = Field(default_factory=list)


# ---------- Entradas ----------

class SurveyIn(BaseModel):
    title: str
    description: Optional[str] = None
    basic_info_questions: List[BasicInfoQuestion] = Field(default_factory=list)
    sections: List[SurveySection] = Field(default_factory=list)


# ---------- Salidas ----------

class SurveyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    basic_info_questions: List[BasicInfoQuestion] = Field(default_factory=list)
    sections: List[SurveySection] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    def section(self, section_id: str) -> Optional[SurveySection]:
        return next((s for s in self.sections if s.id == section_id), None)


class SurveyWithCountOut(SurveyOut):
    response_count: int = 0
