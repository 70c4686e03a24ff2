# likert_app/api/v1/endpoints/admin_reports.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import StreamingResponse

from likert_app.core.security import get_admin_user
from likert_app.schemas.responses import ResponseOut
from likert_app.schemas.results import SurveyResultsOut
from likert_app.services import export
from likert_app.services import surveys as survey_service
from likert_app.services.aggregation import survey_results
from likert_app.services.storage import SurveyStore, get_store

router = APIRouter(prefix="/surveys", tags=["admin-reports"])


def _load(store: SurveyStore, survey_id: UUID):
    survey = survey_service.load_definition(store, survey_id)
    responses = [ResponseOut.model_validate(r) for r in store.list_responses(survey_id)]
    return survey, responses


# 1) RESULTADOS por pregunta
@router.get("/{survey_id}/results", response_model=SurveyResultsOut)
def results(
    survey_id: UUID = Path(..., description="ID de encuesta"),
    store: SurveyStore = Depends(get_store),
    _admin=Depends(get_admin_user),
):
    survey, responses = _load(store, survey_id)
    return survey_results(survey, responses)


# 2) EXPORTS
@router.get("/{survey_id}/exports/responses.xlsx")
def export_responses_xlsx(
    survey_id: UUID = Path(..., description="ID de encuesta"),
    tz: Optional[str] = Query(None, description="Zona horaria para 'Enviado'"),
    store: SurveyStore = Depends(get_store),
    _admin=Depends(get_admin_user),
):
    survey, responses = _load(store, survey_id)
    export.ensure_exportable(responses)
    headers, rows = export.build_export_rows(survey, responses, tz)
    content = export.to_xlsx_bytes(headers, rows)
    filename = export.export_filename(survey, "xlsx")
    return StreamingResponse(
        iter([content]),
        media_type=export.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": export.content_disposition(filename)},
    )


@router.get("/{survey_id}/exports/responses.csv")
def export_responses_csv(
    survey_id: UUID = Path(..., description="ID de encuesta"),
    tz: Optional[str] = Query(None, description="Zona horaria para 'Enviado'"),
    store: SurveyStore = Depends(get_store),
    _admin=Depends(get_admin_user),
):
    survey, responses = _load(store, survey_id)
    export.ensure_exportable(responses)
    headers, rows = export.build_export_rows(survey, responses, tz)
    filename = export.export_filename(survey, "csv")
    return StreamingResponse(
        iter([export.to_csv_bytes(headers, rows)]),
        media_type=export.CSV_MEDIA_TYPE,
        headers={"Content-Disposition": export.content_disposition(filename)},
    )
