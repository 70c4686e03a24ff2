# likert_app/services/aggregation.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Protocol, Sequence

from likert_app.schemas.results import QuestionStatsOut, SectionResultsOut, SurveyResultsOut
from likert_app.schemas.surveys import SurveyOut
from likert_app.services.validation import is_score


class HasSectionAnswers(Protocol):
    section_answers: Mapping[str, Mapping[str, Any]]


def _half_up(x: float, digits: int = 0) -> float:
    q = Decimal(1).scaleb(-digits)
    return float(Decimal(str(x)).quantize(q, rounding=ROUND_HALF_UP))


def _included_values(responses: Iterable[HasSectionAnswers], section_id: str, question_id: str) -> list[int]:
    # solo puntajes 1..5; ausentes, 0 o fuera de rango no cuentan
    values = []
    for r in responses:
        v = (r.section_answers or {}).get(section_id, {}).get(question_id)
        if is_score(v):
            values.append(v)
    return values


def question_stats(
    responses: Sequence[HasSectionAnswers],
    section_id: str,
    question_id: str,
) -> dict:
    """
    count, distribution (c1..c5), average (2 decimales, 0 si count = 0) y
    percentages (entero, respecto a count).
    """
    values = _included_values(responses, section_id, question_id)
    distribution = [0, 0, 0, 0, 0]
    if not values:
        return {"count": 0, "average": 0.0, "distribution": distribution, "percentages": [0, 0, 0, 0, 0]}

    for v in values:
        distribution[v - 1] += 1

    count = len(values)
    average = _half_up(sum(values) / count, 2)
    percentages = [int(_half_up(c * 100 / count)) for c in distribution]
    return {"count": count, "average": average, "distribution": distribution, "percentages": percentages}


def survey_results(survey: SurveyOut, responses: Sequence[HasSectionAnswers]) -> SurveyResultsOut:
    sections = []
    for section in survey.sections:
        questions = [
            QuestionStatsOut(
                question_id=q.id,
                text=q.text,
                is_reverse_coded=q.is_reverse_coded,
                **question_stats(responses, section.id, q.id),
            )
            for q in section.questions
        ]
        sections.append(SectionResultsOut(
            section_id=section.id,
            title=section.title,
            max_one_points=section.max_one_points,
            max_five_points=section.max_five_points,
            questions=questions,
        ))
    return SurveyResultsOut(
        survey_id=survey.id,
        title=survey.title,
        total_responses=len(responses),
        sections=sections,
    )
