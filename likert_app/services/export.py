# likert_app/services/export.py
"""
Exportación de respuestas: una fila plana por respuesta.

Columnas: Nro, Enviado, una por pregunta de información básica (su etiqueta)
y una por "sección - pregunta" con el puntaje o vacío.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Sequence
from urllib.parse import quote
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from openpyxl import Workbook

from likert_app.core.config import settings
from likert_app.core.errors import SurveyValidationError
from likert_app.schemas.responses import ResponseOut
from likert_app.schemas.surveys import SurveyOut

SEQ_HEADER = "Nro"
SUBMITTED_HEADER = "Enviado"
SHEET_TITLE = "Respuestas"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _zone(tz: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(tz or settings.EXPORT_TZ)
    # "America" es un directorio de la base tz: ZoneInfo lanza OSError
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise SurveyValidationError(f"Zona horaria desconocida: {tz}", field="tz")


def format_local(ts: datetime, tz: ZoneInfo) -> str:
    # SQLite devuelve datetimes naive: se asumen UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S")


def export_headers(survey: SurveyOut) -> list[str]:
    headers = [SEQ_HEADER, SUBMITTED_HEADER]
    headers += [q.label for q in survey.basic_info_questions]
    for section in survey.sections:
        headers += [f"{section.title} - {q.text}" for q in section.questions]
    return headers


def build_export_rows(
    survey: SurveyOut,
    responses: Sequence[ResponseOut],
    tz: str | None = None,
) -> tuple[list[str], list[list[Any]]]:
    """Cabecera + filas en el orden recibido (created_at desc al traerlas del store)."""
    zone = _zone(tz)
    rows: list[list[Any]] = []
    for idx, r in enumerate(responses, start=1):
        row: list[Any] = [idx, format_local(r.created_at, zone)]
        row += [r.basic_info.get(q.id) or "" for q in survey.basic_info_questions]
        for section in survey.sections:
            answers = r.section_answers.get(section.id) or {}
            for q in section.questions:
                v = answers.get(q.id)
                row.append(v if v else "")
        rows.append(row)
    return export_headers(survey), rows


def to_xlsx_bytes(headers: list[str], rows: list[list[Any]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(headers)
    for row in rows:
        ws.append([None if v == "" else v for v in row])
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def to_csv_bytes(headers: list[str], rows: list[list[Any]]) -> bytes:
    buf = io.StringIO()
    buf.write("\ufeff")  # BOM para Excel
    w = csv.writer(buf)
    w.writerow(headers)
    w.writerows(rows)
    return buf.getvalue().encode("utf-8")


def export_filename(survey: SurveyOut, ext: str) -> str:
    title = survey.title.strip().replace("/", "-").replace("\\", "-") or "encuesta"
    return f"{title}_resultados.{ext}"


def content_disposition(filename: str) -> str:
    # fallback ASCII + nombre UTF-8 (RFC 5987)
    ascii_name = filename.encode("ascii", "ignore").decode() or "resultados"
    ascii_name = ascii_name.replace('"', "")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def ensure_exportable(responses: Sequence[ResponseOut]) -> None:
    if not responses:
        raise SurveyValidationError("La encuesta no tiene respuestas para exportar.")
