from unittest.mock import patch

from prmerge.interviewer import (
    Answer,
    AnswerValue,
    AutoApproveInterviewer,
    ConsoleInterviewer,
    Interviewer,
    Question,
    QuestionType,
    QueueInterviewer,
)

QUESTION = Question(text="Do you want to proceed with the merge", type=QuestionType.CONFIRMATION)


class TestAutoApproveInterviewer:
    def test_confirms(self) -> None:
        assert AutoApproveInterviewer().ask(QUESTION).confirmed

    def test_satisfies_protocol(self) -> None:
        assert isinstance(AutoApproveInterviewer(), Interviewer)


class TestQueueInterviewer:
    def test_answers_in_order_then_skips(self) -> None:
        interviewer = QueueInterviewer([Answer(value=AnswerValue.YES), Answer(value=AnswerValue.NO)])
        assert interviewer.ask(QUESTION).value == AnswerValue.YES
        assert interviewer.ask(QUESTION).value == AnswerValue.NO
        assert interviewer.ask(QUESTION).value == AnswerValue.SKIPPED
        assert len(interviewer.asked) == 3

    def test_skipped_is_not_confirmed(self) -> None:
        assert not QueueInterviewer([]).ask(QUESTION).confirmed


class TestConsoleInterviewer:
    def _ask(self, *responses: object) -> Answer:
        with patch("prmerge.interviewer.console.sys.stdin") as stdin, patch(
            "builtins.input", side_effect=list(responses)
        ):
            stdin.isatty.return_value = False
            return ConsoleInterviewer().ask(QUESTION)

    def test_yes(self) -> None:
        assert self._ask("y").value == AnswerValue.YES
        assert self._ask(" Yes ").value == AnswerValue.YES

    def test_no(self) -> None:
        assert self._ask("n").value == AnswerValue.NO

    def test_reprompts_until_valid(self) -> None:
        assert self._ask("maybe", "", "yes").value == AnswerValue.YES

    def test_end_of_input_declines(self) -> None:
        assert self._ask(EOFError()).value == AnswerValue.NO

    def test_interrupt_uses_default(self) -> None:
        question = Question(text="Go", default=Answer(value=AnswerValue.YES))
        with patch("prmerge.interviewer.console.sys.stdin") as stdin, patch(
            "builtins.input", side_effect=KeyboardInterrupt
        ):
            stdin.isatty.return_value = False
            assert ConsoleInterviewer().ask(question).value == AnswerValue.YES

    def test_tty_uses_prompt_toolkit(self) -> None:
        with patch("prmerge.interviewer.console.sys.stdin") as stdin, patch(
            "prmerge.interviewer.console.pt_prompt", return_value="y"
        ) as pt_prompt:
            stdin.isatty.return_value = True
            assert ConsoleInterviewer().ask(QUESTION).confirmed
        pt_prompt.assert_called_once_with("Do you want to proceed with the merge (y/n)? ")
