"""Filas planas y serializaciones XLSX / CSV."""
import csv
import io
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from openpyxl import load_workbook

from likert_app.core.errors import SurveyValidationError
from likert_app.schemas.responses import ResponseOut
from likert_app.services import export

from test_validation import make_survey


def make_response(survey, created_at, basic_info, answers):
    return ResponseOut(
        id=uuid4(),
        survey_id=survey.id,
        basic_info=basic_info,
        section_answers={"s1": answers},
        created_at=created_at,
    )


@pytest.fixture
def survey():
    return make_survey()


@pytest.fixture
def responses(survey):
    return [
        make_response(survey, datetime(2024, 3, 2, 15, 0, tzinfo=timezone.utc),
                      {"name": "Ana", "area": "Ventas"}, {"q1": 1, "q2": 5, "q3": 3}),
        make_response(survey, datetime(2024, 3, 1, 12, 30), {"name": "Luis"}, {"q1": 4}),
    ]


def test_headers(survey):
    assert export.export_headers(survey) == [
        "Nro", "Enviado", "Nombre", "Área",
        "Liderazgo - Mi jefe me escucha",
        "Liderazgo - Recibo retroalimentación",
        "Liderazgo - Confío en la dirección",
    ]


def test_rows_keep_order_and_blank_missing(survey, responses):
    _, rows = export.build_export_rows(survey, responses, "UTC")
    assert rows[0] == [1, "2024-03-02 15:00:00", "Ana", "Ventas", 1, 5, 3]
    # naive = UTC; área y q2/q3 vacíos
    assert rows[1] == [2, "2024-03-01 12:30:00", "Luis", "", 4, "", ""]


def test_timestamps_localized(survey, responses):
    _, rows = export.build_export_rows(survey, responses, "America/Bogota")
    assert rows[0][1] == "2024-03-02 10:00:00"


def test_unknown_timezone(survey, responses):
    with pytest.raises(SurveyValidationError):
        export.build_export_rows(survey, responses, "Nowhere/Land")


@pytest.mark.parametrize("tz", ["America", "../etc"])
def test_timezone_that_is_not_a_zone(survey, responses, tz):
    with pytest.raises(SurveyValidationError) as exc:
        export.build_export_rows(survey, responses, tz)
    assert exc.value.field == "tz"


def test_csv_has_bom_and_parses(survey, responses):
    headers, rows = export.build_export_rows(survey, responses, "UTC")
    data = export.to_csv_bytes(headers, rows)
    assert data.startswith(b"\xef\xbb\xbf")
    parsed = list(csv.reader(io.StringIO(data.decode("utf-8-sig"))))
    assert parsed[0] == headers
    assert parsed[1][4:] == ["1", "5", "3"]
    assert len(parsed) == 3


def test_xlsx_roundtrip(survey, responses):
    headers, rows = export.build_export_rows(survey, responses, "UTC")
    wb = load_workbook(io.BytesIO(export.to_xlsx_bytes(headers, rows)))
    ws = wb.active
    assert ws.title == "Respuestas"
    values = list(ws.iter_rows(values_only=True))
    assert list(values[0]) == headers
    assert list(values[1]) == [1, "2024-03-02 15:00:00", "Ana", "Ventas", 1, 5, 3]
    assert values[2][5] is None


def test_filename_and_disposition(survey):
    name = export.export_filename(survey, "csv")
    assert name == "Clima laboral_resultados.csv"
    header = export.content_disposition("Área 1_resultados.xlsx")
    assert 'filename="rea 1_resultados.xlsx"' in header
    assert "filename*=UTF-8''%C3%81rea%201_resultados.xlsx" in header


def test_no_responses_not_exportable():
    with pytest.raises(SurveyValidationError):
        export.ensure_exportable([])
