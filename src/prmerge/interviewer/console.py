from __future__ import annotations

import sys

from prompt_toolkit import prompt as pt_prompt

from prmerge.interviewer.models import Answer, AnswerValue, Question

_YES = ("Y", "YES")
_NO = ("N", "NO")


class ConsoleInterviewer:
    """Asks yes/no questions on the terminal until it gets a y or n.

    End of input or Ctrl-C counts as the question's default, or "no" when it
    has none.
    """

    def ask(self, question: Question) -> Answer:
        while True:
            response = self._read_input(f"{question.text} (y/n)? ")
            if response is None:
                if question.default is not None:
                    return question.default
                return Answer(value=AnswerValue.NO)

            response = response.strip().upper()
            if response in _YES:
                return Answer(value=AnswerValue.YES)
            if response in _NO:
                return Answer(value=AnswerValue.NO)

    def _read_input(self, prompt: str) -> str | None:
        try:
            if sys.stdin.isatty():
                return pt_prompt(prompt)
            return input(prompt)
        except (EOFError, KeyboardInterrupt):
            return None
