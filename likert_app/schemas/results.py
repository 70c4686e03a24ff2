# likert_app/schemas/results.py
from uuid import UUID
from typing import List
from pydantic import BaseModel, Field


class QuestionStatsOut(BaseModel):
    question_id: str
    text: str
    is_reverse_coded: bool = False
    count: int
    average: float
    distribution: List[int] = Field(default_factory=lambda: [0, 0, 0, 0, 0])  # c1..c5
    percentages: List[int] = Field(default_factory=lambda: [0, 0, 0, 0, 0])


class SectionResultsOut(BaseModel):
    section_id: str
    title: str
    max_one_points: int
    max_five_points: int
    questions: List[QuestionStatsOut] = Field(default_factory=list)


class SurveyResultsOut(BaseModel):
    survey_id: UUID
    title: str
    total_responses: int
    sections: List[SectionResultsOut] = Field(default_factory=list)
