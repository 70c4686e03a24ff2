"""
Tests de las reglas de validación (funciones puras, sin BD).
"""
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from likert_app.core.errors import CapExceededError, SurveyValidationError
from likert_app.schemas.surveys import SurveyIn, SurveyOut, SurveySection
from likert_app.services.validation import (
    apply_answer,
    check_answer,
    progress_percent,
    validate_submission,
    validate_survey_definition,
)

from conftest import survey_payload


def make_section(max_one=2, max_five=2, n=4):
    return SurveySection(
        id="s1",
        title="Sección",
        max_one_points=max_one,
        max_five_points=max_five,
        questions=[{"id": f"q{i}", "text": f"Pregunta {i}"} for i in range(1, n + 1)],
    )


def make_survey(**overrides) -> SurveyOut:
    now = datetime.now(timezone.utc)
    return SurveyOut(id=uuid4(), created_at=now, updated_at=now, **survey_payload(**overrides))


class TestCheckAnswer:
    """Topes de 1 y 5 puntos por sección."""

    def test_allows_up_to_cap(self):
        section = make_section(max_one=2)
        answers = apply_answer(section, {}, "q1", 1)
        answers = apply_answer(section, answers, "q2", 1)
        assert answers == {"q1": 1, "q2": 1}

    def test_rejects_one_over_cap_and_leaves_state(self):
        section = make_section(max_one=2)
        current = {"q1": 1, "q2": 1, "q3": 0}
        with pytest.raises(CapExceededError) as exc:
            apply_answer(section, current, "q3", 1)
        assert current == {"q1": 1, "q2": 1, "q3": 0}
        assert exc.value.cap == 2
        assert exc.value.value == 1

    def test_boolean_is_not_a_score(self):
        section = make_section(max_one=2)
        with pytest.raises(SurveyValidationError):
            check_answer(section, {}, "q1", True)

    def test_five_points_mirrored(self):
        section = make_section(max_five=1)
        with pytest.raises(CapExceededError):
            check_answer(section, {"q1": 5}, "q2", 5)

    def test_zero_cap_means_unlimited(self):
        section = make_section(max_one=0, max_five=0)
        answers = {}
        for qid in ("q1", "q2", "q3", "q4"):
            answers = apply_answer(section, answers, qid, 5)
        assert list(answers.values()) == [5, 5, 5, 5]

    def test_reselecting_same_value_is_idempotent(self):
        section = make_section(max_one=2)
        current = {"q1": 1, "q2": 1}
        assert apply_answer(section, current, "q1", 1) == current

    def test_changing_capped_answer_frees_slot(self):
        section = make_section(max_one=1)
        answers = apply_answer(section, {"q1": 1}, "q1", 3)
        assert apply_answer(section, answers, "q2", 1) == {"q1": 3, "q2": 1}

    def test_middle_values_never_capped(self):
        section = make_section(max_one=1, max_five=1)
        current = {"q1": 3, "q2": 3, "q3": 3}
        check_answer(section, current, "q4", 3)

    @pytest.mark.parametrize("value", [0, 6, -1])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(SurveyValidationError):
            check_answer(make_section(), {}, "q1", value)

    def test_rejects_unknown_question(self):
        with pytest.raises(SurveyValidationError):
            check_answer(make_section(), {}, "nope", 3)


class TestSurveyDefinition:
    def test_valid_payload(self):
        validate_survey_definition(SurveyIn(**survey_payload()))

    def test_empty_title(self):
        with pytest.raises(SurveyValidationError) as exc:
            validate_survey_definition(SurveyIn(**survey_payload(title="  ")))
        assert exc.value.field == "title"

    def test_select_without_options(self):
        payload = survey_payload(basic_info_questions=[{"label": "Área", "type": "select", "options": []}])
        with pytest.raises(SurveyValidationError, match="al menos una opción"):
            validate_survey_definition(SurveyIn(**payload))

    def test_select_with_blank_option(self):
        payload = survey_payload(basic_info_questions=[{"label": "Área", "type": "select", "options": ["A", " "]}])
        with pytest.raises(SurveyValidationError, match="opciones"):
            validate_survey_definition(SurveyIn(**payload))

    def test_negative_cap(self):
        payload = survey_payload(sections=[{"title": "S", "max_one_points": -1, "questions": []}])
        with pytest.raises(SurveyValidationError):
            validate_survey_definition(SurveyIn(**payload))

    def test_blank_question_text(self):
        payload = survey_payload(sections=[{"title": "S", "questions": [{"text": ""}]}])
        with pytest.raises(SurveyValidationError):
            validate_survey_definition(SurveyIn(**payload))

    def test_duplicate_question_ids(self):
        payload = survey_payload(sections=[{"title": "S", "questions": [{"id": "a", "text": "x"}, {"id": "a", "text": "y"}]}])
        with pytest.raises(SurveyValidationError, match="repetido"):
            validate_survey_definition(SurveyIn(**payload))


class TestSubmission:
    def test_complete_answers_pass(self):
        survey = make_survey()
        validate_submission(survey, {"name": "Ana", "area": "Soporte"}, {"s1": {"q1": 1, "q2": 5, "q3": 3}})

    def test_boolean_answer_is_incomplete(self):
        survey = make_survey()
        with pytest.raises(SurveyValidationError) as exc:
            validate_submission(survey, {"name": "Ana", "area": "Ventas"}, {"s1": {"q1": True, "q2": 2, "q3": 3}})
        assert exc.value.field == "s1"

    def test_blank_basic_info(self):
        survey = make_survey()
        with pytest.raises(SurveyValidationError, match="Nombre") as exc:
            validate_submission(survey, {"name": "  ", "area": "Ventas"}, {"s1": {"q1": 1, "q2": 2, "q3": 3}})
        assert exc.value.field == "name"

    def test_select_answer_must_be_an_option(self):
        survey = make_survey()
        with pytest.raises(SurveyValidationError, match="opción válida"):
            validate_submission(survey, {"name": "Ana", "area": "Otra"}, {"s1": {"q1": 1, "q2": 2, "q3": 3}})

    def test_unset_score_is_invalid(self):
        survey = make_survey()
        with pytest.raises(SurveyValidationError, match="Responde todas"):
            validate_submission(survey, {"name": "Ana", "area": "Ventas"}, {"s1": {"q1": 1, "q2": 0, "q3": 3}})

    def test_caps_rechecked_on_submit(self):
        survey = make_survey()
        with pytest.raises(CapExceededError):
            validate_submission(survey, {"name": "Ana", "area": "Ventas"}, {"s1": {"q1": 1, "q2": 1, "q3": 1}})

    def test_unknown_section_rejected(self):
        survey = make_survey()
        with pytest.raises(SurveyValidationError):
            validate_submission(
                survey,
                {"name": "Ana", "area": "Ventas"},
                {"s1": {"q1": 1, "q2": 2, "q3": 3}, "otra": {"x": 3}},
            )


class TestProgress:
    def test_empty_is_zero(self):
        assert progress_percent(make_survey(), {}, {}) == 0

    def test_partial(self):
        # 5 campos; 2 completos -> 40%
        survey = make_survey()
        assert progress_percent(survey, {"name": "Ana"}, {"s1": {"q1": 4, "q2": 0}}) == 40

    def test_whitespace_does_not_count(self):
        survey = make_survey()
        assert progress_percent(survey, {"name": "   "}, {}) == 0

    def test_rounds_half_up(self):
        # 1 de 8 campos = 12.5% -> 13
        survey = make_survey(
            basic_info_questions=[],
            sections=[{"id": "s", "title": "S", "questions": [{"id": f"q{i}", "text": "t"} for i in range(8)]}],
        )
        assert progress_percent(survey, {}, {"s": {"q0": 2}}) == 13

    def test_full(self):
        survey = make_survey()
        assert progress_percent(survey, {"name": "Ana", "area": "Ventas"}, {"s1": {"q1": 1, "q2": 2, "q3": 3}}) == 100
