# likert_app/api/v1/endpoints/surveys.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Path

from likert_app.core.errors import CapExceededError
from likert_app.schemas.responses import AnswerCheckIn, AnswerCheckOut, NoticeOut, ResponseIn, ResponseOut
from likert_app.schemas.surveys import SurveyOut
from likert_app.services import surveys as survey_service
from likert_app.services.answer_sheet import AnswerSheet
from likert_app.services.storage import SurveyStore, get_store

router = APIRouter(prefix="/surveys", tags=["surveys"])


@router.get("/{survey_id}", response_model=SurveyOut)
def get_public_survey(
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
):
    return survey_service.load_definition(store, survey_id)


@router.post("/{survey_id}/answers/check", response_model=AnswerCheckOut)
def check_answer(
    payload: AnswerCheckIn,
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
):
    """
    Aplica una respuesta candidata sobre el borrador del cliente.
    Si excede el tope de la sección se devuelve el borrador sin cambios y un aviso.
    """
    survey = survey_service.load_definition(store, survey_id)
    sheet = AnswerSheet.from_draft(survey, payload.basic_info, payload.section_answers)
    try:
        sheet.set_answer(payload.section_id, payload.question_id, payload.value)
    except CapExceededError:
        notice = sheet.warning
        return AnswerCheckOut(
            accepted=False,
            section_answers=sheet.section_answers,
            progress=sheet.progress,
            warning=NoticeOut(message=notice.message, expires_in_seconds=notice.expires_in()),
        )
    return AnswerCheckOut(accepted=True, section_answers=sheet.section_answers, progress=sheet.progress)


@router.post("/{survey_id}/responses", response_model=ResponseOut, status_code=201)
def submit_response(
    payload: ResponseIn,
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
):
    return survey_service.submit_response(store, survey_id, payload)
