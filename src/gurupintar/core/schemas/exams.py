"""
Exam / Question Bank Schemas

Exam questions are a tagged union on ``type``; each variant carries only the
answer fields that apply to it.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from .base import RecordModel, new_id

ExamQuestionType = Literal["MULTIPLE_CHOICE", "ESSAY", "TRUE_FALSE"]


class ExamOption(RecordModel):
    id: str = Field(default_factory=new_id)
    text: str = ""
    is_correct: bool = False


class MultipleChoiceQuestion(RecordModel):
    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    id: str = Field(default_factory=new_id)
    text: str
    points: float = 10
    options: list[ExamOption] = Field(default_factory=list)

    @property
    def correct_options(self) -> list[ExamOption]:
        return [option for option in self.options if option.is_correct]


class EssayQuestion(RecordModel):
    type: Literal["ESSAY"] = "ESSAY"
    id: str = Field(default_factory=new_id)
    text: str
    points: float = 10
    answer_key: str = ""


class TrueFalseQuestion(RecordModel):
    type: Literal["TRUE_FALSE"] = "TRUE_FALSE"
    id: str = Field(default_factory=new_id)
    text: str
    points: float = 10
    correct_answer: bool = False


ExamQuestion = Annotated[
    MultipleChoiceQuestion | EssayQuestion | TrueFalseQuestion,
    Field(discriminator="type"),
]

exam_question_adapter: TypeAdapter[MultipleChoiceQuestion | EssayQuestion | TrueFalseQuestion] = (
    TypeAdapter(ExamQuestion)
)


class ExamPackage(RecordModel):
    id: str = Field(default_factory=new_id)
    title: str
    subject: str
    grade_level: int = 10
    questions: list[ExamQuestion] = Field(default_factory=list)
    created_date: str = ""

    @property
    def total_points(self) -> float:
        return sum(question.points for question in self.questions)
