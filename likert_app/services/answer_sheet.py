# likert_app/services/answer_sheet.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from likert_app.core.config import settings
from likert_app.core.errors import CapExceededError, SurveyValidationError
from likert_app.schemas.responses import ResponseIn
from likert_app.schemas.surveys import SurveyOut
from likert_app.services.validation import apply_answer, progress_percent

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class Notice:
    """Aviso transitorio: se descarta solo tras ``ttl`` segundos o con dismiss()."""
    message: str
    ttl: float
    clock: Clock = time.monotonic
    created_at: float = field(default=0.0)
    dismissed: bool = False

    def __post_init__(self):
        if not self.created_at:
            self.created_at = self.clock()

    def expires_in(self) -> float:
        if self.dismissed:
            return 0.0
        return max(0.0, self.ttl - (self.clock() - self.created_at))

    @property
    def active(self) -> bool:
        return self.expires_in() > 0

    def dismiss(self) -> None:
        self.dismissed = True


class AnswerSheet:
    """
    Borrador de respuesta de un encuestado.

    Arranca con todas las preguntas en "" / 0. ``set_answer`` aplica los topes
    de la sección: si la respuesta se rechaza el estado queda igual y se deja
    un aviso transitorio.
    """

    def __init__(self, survey: SurveyOut, *, warning_ttl: Optional[float] = None, clock: Clock = time.monotonic):
        self.survey = survey
        self.warning_ttl = settings.WARNING_TTL_SECONDS if warning_ttl is None else warning_ttl
        self._clock = clock
        self._notice: Optional[Notice] = None
        self.basic_info: dict[str, str] = {q.id: "" for q in survey.basic_info_questions}
        self.section_answers: dict[str, dict[str, int]] = {
            s.id: {q.id: 0 for q in s.questions} for s in survey.sections
        }

    @classmethod
    def from_draft(
        cls,
        survey: SurveyOut,
        basic_info: Mapping[str, str],
        section_answers: Mapping[str, Mapping[str, int]],
        **kwargs,
    ) -> "AnswerSheet":
        """Carga un borrador enviado por el cliente; ignora claves que no son de la encuesta."""
        sheet = cls(survey, **kwargs)
        for qid, value in basic_info.items():
            if qid in sheet.basic_info:
                sheet.basic_info[qid] = value
        for sid, answers in section_answers.items():
            current = sheet.section_answers.get(sid)
            if current is None:
                continue
            for qid, value in answers.items():
                if qid in current:
                    current[qid] = value
        return sheet

    # ---- edición ----

    def set_basic_info(self, question_id: str, value: str) -> None:
        if question_id not in self.basic_info:
            raise SurveyValidationError("La pregunta no pertenece a esta encuesta.", field=question_id)
        self.basic_info[question_id] = value

    def set_answer(self, section_id: str, question_id: str, value: int) -> None:
        section = self.survey.section(section_id)
        if section is None:
            raise SurveyValidationError("La sección no pertenece a esta encuesta.", field=section_id)
        try:
            updated = apply_answer(section, self.section_answers[section_id], question_id, value)
        except CapExceededError as e:
            logger.debug("Respuesta rechazada en sección %s: %s", section_id, e.detail)
            self._notice = Notice(e.detail, self.warning_ttl, clock=self._clock)
            raise
        self.section_answers[section_id] = updated

    # ---- aviso ----

    @property
    def warning(self) -> Optional[Notice]:
        if self._notice is not None and not self._notice.active:
            self._notice = None
        return self._notice

    def dismiss_warning(self) -> None:
        if self._notice is not None:
            self._notice.dismiss()
            self._notice = None

    # ---- estado ----

    @property
    def progress(self) -> int:
        return progress_percent(self.survey, self.basic_info, self.section_answers)

    @property
    def is_submittable(self) -> bool:
        return self.progress == 100

    def payload(self) -> ResponseIn:
        return ResponseIn(
            basic_info=dict(self.basic_info),
            section_answers={sid: dict(a) for sid, a in self.section_answers.items()},
        )
