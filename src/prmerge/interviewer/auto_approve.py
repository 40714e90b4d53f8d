from __future__ import annotations

from prmerge.interviewer.models import Answer, AnswerValue, Question


class AutoApproveInterviewer:
    def ask(self, question: Question) -> Answer:
        return Answer(value=AnswerValue.YES)
