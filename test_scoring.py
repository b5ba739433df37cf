import pytest

from govtest.core.errors import InvalidInput
from govtest.core.models import Answered, ReviewStatus, SubjectTally, Unanswered
from govtest.core.services.scoring import compute_result, subject_breakdown, summarize_subjects


def test_mixed_answers_score_and_accuracy(make_question):
    questions = [make_question(1, 0), make_question(2, 1), make_question(3, 2)]
    answers = [
        Answered.for_question(questions[0], 0),
        Answered.for_question(questions[1], 3),
        Unanswered(question_id=3),
    ]

    result = compute_result(questions, answers, "tips")

    assert result.correct_answers == 1
    assert result.incorrect_answers == 1
    assert result.skipped_answers == 1
    assert result.accuracy == 50
    assert result.score == 1
    assert result.total_questions == 3
    assert result.ai_tips == "tips"
    assert [r.status for r in result.reviews] == [
        ReviewStatus.CORRECT,
        ReviewStatus.INCORRECT,
        ReviewStatus.SKIPPED,
    ]


def test_all_skipped_has_zero_accuracy(make_question):
    questions = [make_question(1), make_question(2)]
    answers = [Unanswered(question_id=1), Unanswered(question_id=2)]

    result = compute_result(questions, answers, "")

    assert result.accuracy == 0
    assert result.skipped_answers == 2
    assert result.correct_answers + result.incorrect_answers + result.skipped_answers == result.total_questions


def test_accuracy_rounds_half_up(make_question):
    questions = [make_question(i, 0) for i in range(1, 9)]
    answers = [Answered.for_question(questions[0], 0)] + [
        Answered.for_question(q, 1) for q in questions[1:]
    ]

    # 1 of 8 attempted is 12.5%
    assert compute_result(questions, answers, "").accuracy == 13


def test_compute_result_is_idempotent(make_question):
    questions = [make_question(1, 0, subject="Maths"), make_question(2, 1, subject="English")]
    answers = [Answered.for_question(questions[0], 0), Unanswered(question_id=2)]

    assert compute_result(questions, answers, "x") == compute_result(questions, answers, "x")


def test_subject_breakdown_keeps_first_seen_order(make_question):
    questions = [
        make_question(1, 0, subject="Reasoning"),
        make_question(2, 0, subject="Maths"),
        make_question(3, 0, subject="Reasoning"),
    ]
    answers = [
        Answered.for_question(questions[0], 0),
        Answered.for_question(questions[1], 2),
        Answered.for_question(questions[2], 0),
    ]

    breakdown = subject_breakdown(questions, answers)

    assert list(breakdown) == ["Reasoning", "Maths"]
    assert breakdown["Reasoning"] == SubjectTally(correct=2, total=2)
    assert breakdown["Maths"] == SubjectTally(correct=0, total=1)
    assert breakdown["Reasoning"].accuracy == 100
    assert summarize_subjects(questions, answers) == "Reasoning: 2/2, Maths: 0/1"


def test_mismatched_lengths_are_rejected(make_question):
    with pytest.raises(InvalidInput):
        compute_result([make_question(1)], [], "")


def test_result_subject_analysis_is_read_only(make_question):
    questions = [make_question(1, 0, subject="Maths")]
    result = compute_result(questions, [Answered.for_question(questions[0], 0)], "")

    with pytest.raises(TypeError):
        result.subject_analysis["Injected"] = SubjectTally(correct=0, total=0)
    assert list(result.subject_analysis) == ["Maths"]
