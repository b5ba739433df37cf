"""State machine for a single timed mock test attempt."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from govtest.constants.exam_constants import TEST_DURATION_SECONDS
from govtest.core.errors import InvalidInput, InvalidStateTransition
from govtest.core.models import Answer, Answered, Question, Unanswered


class SessionState(str, Enum):
    ACTIVE = "active"
    SUBMITTING = "submitting"
    FINISHED = "finished"


class ExamSession:
    """Owns the questions, answers, cursor, bookmarks and countdown of one test.

    The session moves ACTIVE -> SUBMITTING -> FINISHED on a confirmed manual
    submission, and straight to FINISHED when the countdown runs out. Answers
    can only change while ACTIVE and only for the question under the cursor.
    """

    def __init__(self, questions: Sequence[Question], duration_seconds: int = TEST_DURATION_SECONDS) -> None:
        if not questions:
            raise InvalidInput("A test must contain at least one question.")
        question_ids = [question.id for question in questions]
        if len(set(question_ids)) != len(question_ids):
            raise InvalidInput("Question identifiers must be unique within a test.")
        if duration_seconds <= 0:
            raise InvalidInput("Test duration must be a positive number of seconds.")

        self._questions: tuple[Question, ...] = tuple(questions)
        self._answers: list[Answer] = [Unanswered(question_id=q.id) for q in self._questions]
        self._cursor: int = 0
        self._bookmarks: set[int] = set()
        self._remaining_seconds: int = duration_seconds
        self._state: SessionState = SessionState.ACTIVE
        self._timed_out: bool = False

    @classmethod
    def start(cls, questions: Sequence[Question], duration_seconds: int = TEST_DURATION_SECONDS) -> "ExamSession":
        return cls(questions, duration_seconds=duration_seconds)

    # --- Answering ---

    def select_option(self, option_index: int) -> Answer:
        self._require_state(SessionState.ACTIVE, "select an option")
        answer = Answered.for_question(self._questions[self._cursor], option_index)
        self._answers[self._cursor] = answer
        return answer

    def clear_answer(self) -> Answer:
        self._require_state(SessionState.ACTIVE, "clear an answer")
        answer = Unanswered(question_id=self._questions[self._cursor].id)
        self._answers[self._cursor] = answer
        return answer

    # --- Navigation & bookmarks ---

    def navigate(self, target_index: int) -> None:
        self._require_state(SessionState.ACTIVE, "navigate")
        if not 0 <= target_index < len(self._questions):
            raise InvalidInput(f"Question index {target_index} out of range")
        self._cursor = target_index

    def next_question(self) -> None:
        self.navigate(min(self._cursor + 1, len(self._questions) - 1))

    def previous_question(self) -> None:
        self.navigate(max(self._cursor - 1, 0))

    def toggle_bookmark(self) -> bool:
        """Flip the bookmark on the current question and return the new flag."""
        self._require_state(SessionState.ACTIVE, "bookmark a question")
        if self._cursor in self._bookmarks:
            self._bookmarks.discard(self._cursor)
            return False
        self._bookmarks.add(self._cursor)
        return True

    # --- Countdown ---

    def tick(self) -> bool:
        """Consume one second. Returns True when this tick ran the clock out."""
        if self._state is SessionState.FINISHED:
            raise InvalidStateTransition("Cannot tick a finished test.")
        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        if self._remaining_seconds == 0:
            # Timeout skips the confirmation gate.
            self._state = SessionState.FINISHED
            self._timed_out = True
            return True
        return False

    # --- Submission ---

    def request_submit(self) -> None:
        self._require_state(SessionState.ACTIVE, "request submission")
        self._state = SessionState.SUBMITTING

    def confirm_submit(self, confirmed: bool) -> SessionState:
        self._require_state(SessionState.SUBMITTING, "confirm submission")
        self._state = SessionState.FINISHED if confirmed else SessionState.ACTIVE
        return self._state

    def finish(self) -> tuple[Answer, ...]:
        """Return the frozen answers for scoring."""
        self._require_state(SessionState.FINISHED, "finish")
        return tuple(self._answers)

    # --- Read access ---

    def get_state(self) -> SessionState:
        return self._state

    def is_running(self) -> bool:
        return self._state is not SessionState.FINISHED

    def is_timed_out(self) -> bool:
        return self._timed_out

    def get_questions(self) -> tuple[Question, ...]:
        return self._questions

    def get_answers(self) -> list[Answer]:
        return list(self._answers)

    def get_question_count(self) -> int:
        return len(self._questions)

    def get_answered_count(self) -> int:
        return sum(1 for answer in self._answers if answer.selected_option is not None)

    def get_cursor(self) -> int:
        return self._cursor

    def get_current_question(self) -> Question:
        return self._questions[self._cursor]

    def get_current_answer(self) -> Answer:
        return self._answers[self._cursor]

    def get_bookmarks(self) -> frozenset[int]:
        return frozenset(self._bookmarks)

    def get_remaining_seconds(self) -> int:
        return self._remaining_seconds

    def _require_state(self, expected: SessionState, action: str) -> None:
        if self._state is not expected:
            raise InvalidStateTransition(
                f"Cannot {action} while the test is {self._state.value}."
            )
