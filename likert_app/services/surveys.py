# likert_app/services/surveys.py
"""
Flujos de administración: crear / actualizar / borrar encuestas y respuestas,
y el envío de respuestas de los encuestados.

La validación se hace siempre antes de cualquier escritura.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional
from uuid import UUID, uuid4

from likert_app.core.errors import NotFoundError, StorageError, SurveyLockedError
from likert_app.models.survey import Survey
from likert_app.schemas.responses import BulkDeleteFailure, BulkDeleteOut, ResponseIn, ResponseOut
from likert_app.schemas.surveys import SurveyIn, SurveyOut, SurveyWithCountOut
from likert_app.services.storage import SurveyStore
from likert_app.services.validation import validate_submission, validate_survey_definition

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex


def to_survey_out(row: Survey, response_count: Optional[int] = None) -> SurveyWithCountOut:
    out = SurveyWithCountOut.model_validate(row)
    if response_count is not None:
        out.response_count = response_count
    return out


def get_survey_or_404(store: SurveyStore, survey_id: UUID) -> Survey:
    s = store.get_survey(survey_id)
    if not s:
        raise NotFoundError("Encuesta no encontrada")
    return s


def load_definition(store: SurveyStore, survey_id: UUID) -> SurveyOut:
    return SurveyOut.model_validate(get_survey_or_404(store, survey_id))


def assign_identifiers(payload: SurveyIn) -> SurveyIn:
    """Copia del payload con id generado en cada pregunta/sección que no lo traiga."""
    survey = payload.model_copy(deep=True)
    for q in survey.basic_info_questions:
        q.id = q.id or _new_id()
    for section in survey.sections:
        section.id = section.id or _new_id()
        for q in section.questions:
            q.id = q.id or _new_id()
    return survey


def _definition_fields(payload: SurveyIn) -> dict:
    data = payload.model_dump(mode="json", by_alias=True)
    return {
        "title": data["title"].strip(),
        "description": (data.get("description") or "").strip() or None,
        "basic_info_questions": data["basic_info_questions"],
        "sections": data["sections"],
    }


# -------------------- encuestas -------------------- #

def list_surveys(store: SurveyStore) -> list[SurveyWithCountOut]:
    return [to_survey_out(s, n) for s, n in store.list_surveys()]


def get_survey(store: SurveyStore, survey_id: UUID) -> SurveyWithCountOut:
    row = get_survey_or_404(store, survey_id)
    return to_survey_out(row, store.count_responses(survey_id))


def create_survey(store: SurveyStore, payload: SurveyIn) -> SurveyWithCountOut:
    validate_survey_definition(payload)
    survey = assign_identifiers(payload)
    row = store.create_survey(_definition_fields(survey))
    logger.info("Encuesta creada %s (%s)", row.id, row.title)
    return to_survey_out(row, 0)


def update_survey(store: SurveyStore, survey_id: UUID, payload: SurveyIn) -> SurveyWithCountOut:
    row = get_survey_or_404(store, survey_id)

    # Se vuelve a contar aquí: el conteo que vio el cliente puede estar viejo
    count = store.count_responses(survey_id)
    if count > 0:
        logger.info("Actualización rechazada: encuesta %s tiene %d respuestas", survey_id, count)
        raise SurveyLockedError()

    validate_survey_definition(payload)
    survey = assign_identifiers(payload)
    row = store.update_survey(row, _definition_fields(survey))
    logger.info("Encuesta actualizada %s", survey_id)
    return to_survey_out(row, 0)


def delete_survey(store: SurveyStore, survey_id: UUID) -> None:
    if not store.delete_survey(survey_id):
        raise NotFoundError("Encuesta no encontrada")
    logger.info("Encuesta eliminada %s", survey_id)


# -------------------- respuestas -------------------- #

def list_responses(store: SurveyStore, survey_id: UUID) -> list[ResponseOut]:
    get_survey_or_404(store, survey_id)
    return [ResponseOut.model_validate(r) for r in store.list_responses(survey_id)]


def submit_response(store: SurveyStore, survey_id: UUID, payload: ResponseIn) -> ResponseOut:
    survey = load_definition(store, survey_id)
    validate_submission(survey, payload.basic_info, payload.section_answers)
    basic_info = {k: v.strip() for k, v in payload.basic_info.items()}
    row = store.create_response(survey_id, basic_info, payload.section_answers)
    logger.info("Respuesta %s registrada para encuesta %s", row.id, survey_id)
    return ResponseOut.model_validate(row)


def delete_response(store: SurveyStore, response_id: UUID) -> None:
    if not store.delete_response(response_id):
        raise NotFoundError("Respuesta no encontrada")


def delete_responses(store: SurveyStore, response_ids: Iterable[UUID]) -> BulkDeleteOut:
    """
    Borra cada id por separado (sin transacción común). Los fallos parciales
    se devuelven en ``failed``.
    """
    out = BulkDeleteOut()
    for rid in dict.fromkeys(response_ids):  # dedup conservando orden
        try:
            delete_response(store, rid)
        except (NotFoundError, StorageError) as e:
            logger.warning("No se pudo borrar la respuesta %s: %s", rid, e.detail)
            out.failed.append(BulkDeleteFailure(id=rid, detail=e.detail))
        else:
            out.deleted.append(rid)
    return out
