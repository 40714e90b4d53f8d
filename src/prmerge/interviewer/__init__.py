from prmerge.interviewer.auto_approve import AutoApproveInterviewer
from prmerge.interviewer.base import Interviewer
from prmerge.interviewer.console import ConsoleInterviewer
from prmerge.interviewer.models import Answer, AnswerValue, Question, QuestionType
from prmerge.interviewer.queue import QueueInterviewer

__all__ = [
    "Answer",
    "AnswerValue",
    "AutoApproveInterviewer",
    "ConsoleInterviewer",
    "Interviewer",
    "Question",
    "QuestionType",
    "QueueInterviewer",
]
