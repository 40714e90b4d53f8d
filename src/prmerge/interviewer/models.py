from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class QuestionType(str, Enum):
    YES_NO = "YES_NO"
    CONFIRMATION = "CONFIRMATION"


class AnswerValue(str, Enum):
    YES = "YES"
    NO = "NO"
    SKIPPED = "SKIPPED"


class Answer(BaseModel):
    value: AnswerValue = AnswerValue.SKIPPED

    @property
    def confirmed(self) -> bool:
        return self.value == AnswerValue.YES


class Question(BaseModel):
    text: str
    type: QuestionType = QuestionType.YES_NO
    default: Answer | None = None
