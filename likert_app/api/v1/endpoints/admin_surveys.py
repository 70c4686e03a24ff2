# likert_app/api/v1/endpoints/admin_surveys.py
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status

from likert_app.core.security import get_admin_user
from likert_app.schemas.responses import BulkDeleteIn, BulkDeleteOut, ResponseOut
from likert_app.schemas.surveys import SurveyIn, SurveyWithCountOut
from likert_app.services import surveys as survey_service
from likert_app.services.storage import SurveyStore, get_store

router = APIRouter(tags=["admin"])


# --------------------------
# GET /admin/surveys
# --------------------------
@router.get("/surveys", response_model=List[SurveyWithCountOut])
def admin_list_surveys(
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    return survey_service.list_surveys(store)


# --------------------------
# POST /admin/surveys
# --------------------------
@router.post("/surveys", response_model=SurveyWithCountOut, status_code=201)
def admin_create_survey(
    payload: SurveyIn,
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    return survey_service.create_survey(store, payload)


# --------------------------
# GET /admin/surveys/{survey_id}
# --------------------------
@router.get("/surveys/{survey_id}", response_model=SurveyWithCountOut)
def admin_get_survey(
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    return survey_service.get_survey(store, survey_id)


# --------------------------
# PUT /admin/surveys/{survey_id}
# --------------------------
@router.put("/surveys/{survey_id}", response_model=SurveyWithCountOut)
def admin_update_survey(
    payload: SurveyIn,
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    # 409 si ya hay respuestas (se cuenta de nuevo en el servidor)
    return survey_service.update_survey(store, survey_id, payload)


# --------------------------
# DELETE /admin/surveys/{survey_id}
# --------------------------
@router.delete("/surveys/{survey_id}", status_code=204)
def admin_delete_survey(
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    survey_service.delete_survey(store, survey_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --------------------------
# GET /admin/surveys/{survey_id}/responses
# --------------------------
@router.get("/surveys/{survey_id}/responses", response_model=List[ResponseOut])
def admin_list_responses(
    survey_id: UUID = Path(..., description="ID de la encuesta"),
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    return survey_service.list_responses(store, survey_id)


# --------------------------
# DELETE /admin/responses/{response_id}
# --------------------------
@router.delete("/responses/{response_id}", status_code=204)
def admin_delete_response(
    response_id: UUID = Path(..., description="ID de la respuesta"),
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    survey_service.delete_response(store, response_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --------------------------
# POST /admin/responses/bulk-delete
# --------------------------
@router.post("/responses/bulk-delete", response_model=BulkDeleteOut)
def admin_bulk_delete_responses(
    payload: BulkDeleteIn,
    store: SurveyStore = Depends(get_store),
    admin=Depends(get_admin_user),
):
    return survey_service.delete_responses(store, payload.ids)
