# likert_app/services/validation.py
"""
Reglas de validación de encuestas y respuestas.

Funciones puras: reciben la definición (pydantic) y los diccionarios de
respuestas, y levantan ``SurveyValidationError`` / ``CapExceededError`` con un
mensaje listo para mostrar. Nada aquí toca la base de datos.
"""
from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Union

from likert_app.core.errors import CapExceededError, SurveyValidationError
from likert_app.schemas.surveys import SelectQuestion, SurveyIn, SurveyOut, SurveySection

VALID_SCORES = (1, 2, 3, 4, 5)
CAPPED_SCORES = (1, 5)


def is_score(value) -> bool:
    # bool es subclase de int: True no es un 1
    return type(value) is int and value in VALID_SCORES

SurveyDefinition = Union[SurveyIn, SurveyOut]


# -------------------- definición de encuesta -------------------- #

def _ensure_unique(ids: Iterable[Optional[str]], what: str) -> None:
    seen = set()
    for i in ids:
        if i is None:
            continue
        if i in seen:
            raise SurveyValidationError(f"Identificador repetido en {what}: {i}", field=i)
        seen.add(i)


def validate_survey_definition(survey: SurveyDefinition) -> None:
    """Valida la forma completa antes de persistir; falla en el primer error."""
    if not survey.title.strip():
        raise SurveyValidationError("Ingresa el título de la encuesta.", field="title")

    for q in survey.basic_info_questions:
        if not q.label.strip():
            raise SurveyValidationError(
                "Completa el enunciado de todas las preguntas de información básica.",
                field="basic_info_questions",
            )
        if isinstance(q, SelectQuestion):
            if not q.options:
                raise SurveyValidationError(
                    "Las preguntas de selección necesitan al menos una opción.",
                    field="basic_info_questions",
                )
            if any(not o.strip() for o in q.options):
                raise SurveyValidationError("Completa todas las opciones.", field="basic_info_questions")
    _ensure_unique((q.id for q in survey.basic_info_questions), "información básica")

    for section in survey.sections:
        if not section.title.strip():
            raise SurveyValidationError("Ingresa el título de todas las secciones.", field="sections")
        if section.max_five_points < 0:
            raise SurveyValidationError(
                "El máximo de preguntas con 5 puntos debe ser 0 o mayor.", field="sections"
            )
        if section.max_one_points < 0:
            raise SurveyValidationError(
                "El máximo de preguntas con 1 punto debe ser 0 o mayor.", field="sections"
            )
        for q in section.questions:
            if not q.text.strip():
                raise SurveyValidationError("Completa el texto de todas las preguntas.", field="sections")
        _ensure_unique((q.id for q in section.questions), f'la sección "{section.title}"')
    _ensure_unique((s.id for s in survey.sections), "secciones")


# -------------------- topes por sección -------------------- #

def cap_for(section: SurveySection, value: int) -> int:
    """Tope de la sección para ``value``; 0 = sin límite."""
    if value == 1:
        return section.max_one_points
    if value == 5:
        return section.max_five_points
    return 0


def _cap_message(value: int, cap: int) -> str:
    puntos = "punto" if value == 1 else "puntos"
    return f"En esta sección solo puedes marcar {value} {puntos} en un máximo de {cap} preguntas."


def check_answer(
    section: SurveySection,
    current: Mapping[str, int],
    question_id: str,
    value: int,
) -> None:
    """
    ¿Se puede poner ``question_id = value`` sobre las respuestas actuales de la sección?
    Re-seleccionar el mismo valor nunca cuenta contra el tope.
    """
    if not is_score(value):
        raise SurveyValidationError("El puntaje debe estar entre 1 y 5.", field=question_id)
    if question_id not in {q.id for q in section.questions}:
        raise SurveyValidationError("La pregunta no pertenece a esta sección.", field=question_id)

    cap = cap_for(section, value)
    if cap > 0 and current.get(question_id) != value:
        used = sum(1 for v in current.values() if v == value)
        if used >= cap:
            raise CapExceededError(
                _cap_message(value, cap), section_id=section.id, value=value, cap=cap
            )


def apply_answer(
    section: SurveySection,
    current: Mapping[str, int],
    question_id: str,
    value: int,
) -> dict[str, int]:
    """Devuelve una copia con la respuesta aplicada; ``current`` no se modifica."""
    check_answer(section, current, question_id, value)
    return {**current, question_id: value}


# -------------------- envío -------------------- #

def count_fields(survey: SurveyDefinition) -> int:
    return len(survey.basic_info_questions) + sum(len(s.questions) for s in survey.sections)


def count_filled(
    survey: SurveyDefinition,
    basic_info: Mapping[str, str],
    section_answers: Mapping[str, Mapping[str, int]],
) -> int:
    filled = sum(1 for q in survey.basic_info_questions if (basic_info.get(q.id) or "").strip())
    for section in survey.sections:
        answers = section_answers.get(section.id) or {}
        filled += sum(1 for q in section.questions if (answers.get(q.id) or 0) > 0)
    return filled


def progress_percent(
    survey: SurveyDefinition,
    basic_info: Mapping[str, str],
    section_answers: Mapping[str, Mapping[str, int]],
) -> int:
    """Porcentaje entero (redondeo half-up) de campos completos."""
    total = count_fields(survey)
    if total == 0:
        return 100
    filled = count_filled(survey, basic_info, section_answers)
    return int(math.floor(filled * 100 / total + 0.5))


def validate_submission(
    survey: SurveyOut,
    basic_info: Mapping[str, str],
    section_answers: Mapping[str, Mapping[str, int]],
) -> None:
    """Todas las preguntas respondidas, valores 1..5 y topes respetados."""
    known_basic = {q.id for q in survey.basic_info_questions}
    extra = set(basic_info) - known_basic
    if extra:
        raise SurveyValidationError("La respuesta contiene preguntas que no existen en la encuesta.",
                                    field=sorted(extra)[0])

    for q in survey.basic_info_questions:
        answer = (basic_info.get(q.id) or "").strip()
        if not answer:
            raise SurveyValidationError(f'Completa el campo "{q.label}".', field=q.id)
        if isinstance(q, SelectQuestion) and answer not in {o.strip() for o in q.options}:
            raise SurveyValidationError(f'Selecciona una opción válida en "{q.label}".', field=q.id)

    known_sections = {s.id for s in survey.sections}
    extra = set(section_answers) - known_sections
    if extra:
        raise SurveyValidationError("La respuesta contiene secciones que no existen en la encuesta.",
                                    field=sorted(extra)[0])

    for section in survey.sections:
        answers = section_answers.get(section.id) or {}
        extra = set(answers) - {q.id for q in section.questions}
        if extra:
            raise SurveyValidationError("La respuesta contiene preguntas que no existen en la encuesta.",
                                        field=sorted(extra)[0])
        for q in section.questions:
            if not is_score(answers.get(q.id)):
                raise SurveyValidationError("Responde todas las preguntas.", field=section.id)
        for value in CAPPED_SCORES:
            cap = cap_for(section, value)
            if cap > 0 and sum(1 for v in answers.values() if v == value) > cap:
                raise CapExceededError(
                    _cap_message(value, cap), section_id=section.id, value=value, cap=cap
                )
