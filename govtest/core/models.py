"""Domain models for the mock test trainer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from govtest.constants.exam_constants import OPTION_COUNT
from govtest.core.errors import InvalidInput


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass(frozen=True, slots=True)
class ExamType:
    """Exam category shown on the first screen."""

    id: str
    name: str
    description: str
    icon: str


@dataclass(frozen=True, slots=True)
class Subject:
    """Subject a mock test can be generated for."""

    id: str
    name: str
    icon: str


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: int
    text: str
    options: tuple[str, ...]
    correct_answer: int
    explanation: str
    difficulty: Difficulty
    subject: str

    def __post_init__(self) -> None:
        if len(self.options) != OPTION_COUNT:
            raise InvalidInput(f"Question {self.id} must have exactly {OPTION_COUNT} options.")
        if not 0 <= self.correct_answer < OPTION_COUNT:
            raise InvalidInput(f"Question {self.id} has correct answer {self.correct_answer} out of range.")


@dataclass(frozen=True, slots=True)
class Unanswered:
    """Answer slot for a question the trainee has not answered (or cleared)."""

    question_id: int

    @property
    def selected_option(self) -> None:
        return None

    @property
    def is_correct(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class Answered:
    """Answer slot holding the selected option and the question's correct option.

    ``is_correct`` is derived from the two, so an answer can never disagree
    with its question.
    """

    question_id: int
    selected_option: int
    correct_option: int

    def __post_init__(self) -> None:
        for index in (self.selected_option, self.correct_option):
            if not 0 <= index < OPTION_COUNT:
                raise InvalidInput(f"Option index {index} out of range")

    @property
    def is_correct(self) -> bool:
        return self.selected_option == self.correct_option

    @classmethod
    def for_question(cls, question: Question, option_index: int) -> "Answered":
        return cls(
            question_id=question.id,
            selected_option=option_index,
            correct_option=question.correct_answer,
        )


Answer = Unanswered | Answered


class ReviewStatus(str, Enum):
    CORRECT = "Correct"
    INCORRECT = "Incorrect"
    SKIPPED = "Skipped"


@dataclass(frozen=True, slots=True)
class SubjectTally:
    """Correct and total counts for a single subject."""

    correct: int
    total: int

    @property
    def accuracy(self) -> int:
        if self.total == 0:
            return 0
        return round_half_up(100 * self.correct / self.total)


@dataclass(frozen=True, slots=True)
class QuestionReview:
    """One row of the post-test review list."""

    number: int
    question: Question
    answer: Answer
    status: ReviewStatus


@dataclass(frozen=True, slots=True)
class TestResult:
    """Immutable score report computed once from a finished session."""

    score: int
    total_questions: int
    correct_answers: int
    incorrect_answers: int
    skipped_answers: int
    accuracy: int
    subject_analysis: Mapping[str, SubjectTally]
    reviews: tuple[QuestionReview, ...]
    ai_tips: str


def round_half_up(value: float) -> int:
    """Round like the browser does: 0.5 always goes up."""
    return int(value + 0.5)
