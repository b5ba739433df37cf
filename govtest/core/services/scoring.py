"""Score and per-subject analytics for a finished mock test."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from govtest.core.errors import InvalidInput
from govtest.core.models import (
    Answer,
    Question,
    QuestionReview,
    ReviewStatus,
    SubjectTally,
    TestResult,
    round_half_up,
)


def compute_result(questions: Sequence[Question], answers: Sequence[Answer], tips: str) -> TestResult:
    """Build the score report for a finished test.

    Accuracy only counts attempted questions and is 0 when nothing was
    attempted. The subject breakdown keeps the order in which subjects first
    appear in the test.
    """
    _check_pairing(questions, answers)

    total = len(questions)
    correct = count_correct(answers)
    skipped = sum(1 for answer in answers if answer.selected_option is None)
    attempted = total - skipped
    accuracy = round_half_up(100 * correct / attempted) if attempted else 0

    return TestResult(
        score=correct,
        total_questions=total,
        correct_answers=correct,
        incorrect_answers=total - correct - skipped,
        skipped_answers=skipped,
        accuracy=accuracy,
        subject_analysis=subject_breakdown(questions, answers),
        reviews=tuple(
            QuestionReview(number=i + 1, question=q, answer=a, status=_review_status(a))
            for i, (q, a) in enumerate(zip(questions, answers))
        ),
        ai_tips=tips,
    )


def count_correct(answers: Sequence[Answer]) -> int:
    return sum(1 for answer in answers if answer.is_correct is True)


def subject_breakdown(questions: Sequence[Question], answers: Sequence[Answer]) -> Mapping[str, SubjectTally]:
    """Per-subject tallies in first-seen order, as a read-only mapping."""
    _check_pairing(questions, answers)
    counts: dict[str, list[int]] = {}
    for question, answer in zip(questions, answers):
        entry = counts.setdefault(question.subject, [0, 0])
        entry[1] += 1
        if answer.is_correct:
            entry[0] += 1
    return MappingProxyType({subject: SubjectTally(correct=c, total=t) for subject, (c, t) in counts.items()})


def summarize_subjects(questions: Sequence[Question], answers: Sequence[Answer]) -> str:
    """Describe per-subject performance for the tip generator."""
    breakdown = subject_breakdown(questions, answers)
    return ", ".join(f"{subject}: {tally.correct}/{tally.total}" for subject, tally in breakdown.items())


def _review_status(answer: Answer) -> ReviewStatus:
    if answer.selected_option is None:
        return ReviewStatus.SKIPPED
    return ReviewStatus.CORRECT if answer.is_correct else ReviewStatus.INCORRECT


def _check_pairing(questions: Sequence[Question], answers: Sequence[Answer]) -> None:
    if len(questions) != len(answers):
        raise InvalidInput(
            f"Got {len(answers)} answers for {len(questions)} questions."
        )
