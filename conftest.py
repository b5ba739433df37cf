"""Shared fixtures: question factories, fake gateways and a hand-driven ticker."""

from __future__ import annotations

import pytest

from govtest.core.errors import GenerationFailure, TipFailure
from govtest.core.exam_manager import ExamManager
from govtest.core.models import Difficulty, Question


def _make_question(
    question_id: int,
    correct_answer: int = 0,
    subject: str = "General Knowledge",
    difficulty: Difficulty = Difficulty.MEDIUM,
) -> Question:
    return Question(
        id=question_id,
        text=f"Question {question_id}?",
        options=("Alpha", "Beta", "Gamma", "Delta"),
        correct_answer=correct_answer,
        explanation=f"Because of reason {question_id}.",
        difficulty=difficulty,
        subject=subject,
    )


class FakeQuestionGenerator:
    def __init__(self, questions: list[Question] | None = None) -> None:
        self.questions = questions if questions is not None else [_make_question(i, i % 4) for i in range(1, 4)]
        self.fail = False
        self.calls: list[tuple[str, str]] = []
        self.before_return = None

    def generate_questions(self, exam_name: str, subject_name: str) -> list[Question]:
        self.calls.append((exam_name, subject_name))
        if self.before_return is not None:
            self.before_return()
        if self.fail:
            raise GenerationFailure("service unavailable")
        return list(self.questions)


class FakeTipGenerator:
    def __init__(self) -> None:
        self.fail = False
        self.calls: list[tuple[int, int, str]] = []

    def generate_tips(self, correct_count: int, total_count: int, subject_summary: str) -> str:
        self.calls.append((correct_count, total_count, subject_summary))
        if self.fail:
            raise TipFailure("quota exceeded")
        return "- Revise weak topics\n- Practice daily"


class ManualTicker:
    """Stands in for CountdownTicker; tests fire ticks by hand."""

    def __init__(self, on_tick) -> None:
        self.on_tick = on_tick
        self.started = False
        self.cancel_count = 0

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancel_count += 1

    def fire(self, times: int = 1) -> bool:
        for _ in range(times):
            if not self.on_tick():
                return False
        return True


@pytest.fixture
def make_question():
    return _make_question


@pytest.fixture
def question_generator() -> FakeQuestionGenerator:
    return FakeQuestionGenerator()


@pytest.fixture
def tip_generator() -> FakeTipGenerator:
    return FakeTipGenerator()


@pytest.fixture
def tickers() -> list[ManualTicker]:
    return []


@pytest.fixture
def manager_factory(question_generator, tip_generator, tickers):
    def factory(test_duration_seconds: int = 1800) -> ExamManager:
        def ticker_factory(on_tick):
            ticker = ManualTicker(on_tick)
            tickers.append(ticker)
            return ticker

        return ExamManager(
            question_generator=question_generator,
            tip_generator=tip_generator,
            test_duration_seconds=test_duration_seconds,
            ticker_factory=ticker_factory,
        )

    return factory
