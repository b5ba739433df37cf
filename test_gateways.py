import json
from types import SimpleNamespace

import pytest

from govtest.constants.exam_constants import EMPTY_TIPS_TEXT
from govtest.core.errors import GenerationFailure, TipFailure
from govtest.core.gateways.question_generator import (
    GeminiQuestionGenerator,
    build_question_prompt,
    parse_questions,
)
from govtest.core.gateways.tip_generator import GeminiTipGenerator, build_tips_prompt
from govtest.core.models import Difficulty


class FakeModel:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self._text = text
        self._error = error
        self.calls = []

    def generate_content(self, prompt, **kwargs):
        self.calls.append((prompt, kwargs))
        if self._error is not None:
            raise self._error
        return SimpleNamespace(text=self._text)


def _item(**overrides):
    item = {
        "id": 7,
        "text": "  What is $2 + 2$?  ",
        "options": ["3", "4", "5", "22"],
        "correctAnswer": 1,
        "explanation": "Basic addition.",
        "difficulty": "Easy",
        "subject": "Mathematics",
    }
    item.update(overrides)
    return item


def test_parse_questions_renumbers_and_cleans():
    raw = json.dumps([_item(), _item(id=7, difficulty="Hard")])

    questions = parse_questions(raw)

    assert [q.id for q in questions] == [1, 2]
    assert questions[0].text == "What is $2 + 2$?"
    assert questions[0].options == ("3", "4", "5", "22")
    assert questions[0].correct_answer == 1
    assert questions[1].difficulty is Difficulty.HARD


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        json.dumps([_item(options=["a", "b", "c"])]),
        json.dumps([_item(correctAnswer=4)]),
        json.dumps([_item(difficulty="Impossible")]),
        json.dumps([_item(text="")]),
        json.dumps({"questions": [_item()]}),
    ],
)
def test_parse_questions_rejects_malformed_output(raw):
    with pytest.raises(GenerationFailure):
        parse_questions(raw)


def test_gemini_question_generator_requests_json():
    model = FakeModel(text=json.dumps([_item()]))
    generator = GeminiQuestionGenerator(model=model, timeout_seconds=30)

    questions = generator.generate_questions("SSC CGL/CHSL", "Full Length Test")

    assert len(questions) == 1
    prompt, kwargs = model.calls[0]
    assert "SSC CGL/CHSL" in prompt and "Full Length Test" in prompt
    assert kwargs["generation_config"].response_mime_type == "application/json"
    assert kwargs["request_options"] == {"timeout": 30}


def test_gemini_question_generator_wraps_transport_errors():
    generator = GeminiQuestionGenerator(model=FakeModel(error=ConnectionError("offline")))

    with pytest.raises(GenerationFailure):
        generator.generate_questions("SSC", "Maths")


def test_question_prompt_mentions_distribution():
    prompt = build_question_prompt("RRB NTPC/Group D", "General Knowledge")

    assert "exactly 40" in prompt
    assert "10 Easy, 20 Medium, 10 Hard" in prompt


def test_tip_generator_returns_text_and_default():
    assert GeminiTipGenerator(model=FakeModel(text="  - Revise  ")).generate_tips(3, 5, "Maths: 3/5") == "- Revise"
    assert GeminiTipGenerator(model=FakeModel(text="")).generate_tips(0, 5, "") == EMPTY_TIPS_TEXT


def test_tip_generator_raises_tip_failure():
    generator = GeminiTipGenerator(model=FakeModel(error=RuntimeError("quota exceeded")))

    with pytest.raises(TipFailure):
        generator.generate_tips(1, 2, "Maths: 1/2")


def test_tips_prompt_contains_score_and_summary():
    prompt = build_tips_prompt(12, 40, "Reasoning: 12/40")

    assert "Score: 12/40" in prompt
    assert "Subject performance: Reasoning: 12/40" in prompt
