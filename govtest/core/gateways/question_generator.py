"""Question generation backed by the Gemini API.

The generator asks Gemini for a JSON array of questions that follows a fixed
response schema, validates every item with pydantic and converts it into
immutable :class:`~govtest.core.models.Question` records. Anything that goes
wrong on the way (transport errors, blocked responses, malformed JSON, items
with the wrong number of options) surfaces as ``GenerationFailure``; no retry
happens here, the trainee retries by picking the subject again.

Question ids coming back from the model are not trusted to be unique, so the
questions are renumbered 1..N in the order received.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypedDict

import google.generativeai as genai
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from govtest.constants.exam_constants import (
    DEFAULT_QUESTION_MODEL,
    DIFFICULTY_DISTRIBUTION,
    EXPECTED_QUESTION_COUNT,
    OPTION_COUNT,
)
from govtest.core.errors import GenerationFailure, InvalidInput
from govtest.core.models import Difficulty, Question

logger = logging.getLogger(__name__)


class QuestionGenerator(Protocol):
    def generate_questions(self, exam_name: str, subject_name: str) -> list[Question]:
        ...


class QuestionSchema(TypedDict):
    """Response schema handed to Gemini."""

    id: int
    text: str
    options: list[str]
    correctAnswer: int
    explanation: str
    difficulty: str
    subject: str


class GeneratedQuestion(BaseModel):
    """Validation model for one question item of the Gemini response."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    text: str = Field(min_length=1)
    options: list[str]
    correct_answer: int = Field(alias="correctAnswer", ge=0, lt=OPTION_COUNT)
    explanation: str = ""
    difficulty: Difficulty
    subject: str = Field(min_length=1)

    @field_validator("options")
    @classmethod
    def _check_options(cls, options: list[str]) -> list[str]:
        cleaned = [option.strip() for option in options]
        if len(cleaned) != OPTION_COUNT:
            raise ValueError(f"expected exactly {OPTION_COUNT} options, got {len(cleaned)}")
        if any(not option for option in cleaned):
            raise ValueError("option text cannot be empty")
        return cleaned

    def to_question(self, question_id: int) -> Question:
        return Question(
            id=question_id,
            text=self.text.strip(),
            options=tuple(self.options),
            correct_answer=self.correct_answer,
            explanation=self.explanation.strip(),
            difficulty=self.difficulty,
            subject=self.subject.strip(),
        )


_QUESTION_LIST = TypeAdapter(list[GeneratedQuestion])


def build_question_prompt(exam_name: str, subject_name: str) -> str:
    distribution = ", ".join(f"{count} {level}" for level, count in DIFFICULTY_DISTRIBUTION.items())
    return (
        f"Generate exactly {EXPECTED_QUESTION_COUNT} high-quality multiple-choice questions for the "
        f"{exam_name} examination, specifically focusing on the subject: {subject_name}.\n\n"
        "Requirements:\n"
        f"1. Difficulty distribution: {distribution}.\n"
        f"2. Each question must have exactly {OPTION_COUNT} options.\n"
        "3. Include a clear explanation for the correct answer.\n"
        "4. Questions must follow the latest patterns of competitive government exams in India.\n"
        "5. Language: English.\n\n"
        "Response format: A JSON array of objects with the fields id, text, options, "
        "correctAnswer (index 0-3 of the correct option), explanation, "
        "difficulty (Easy, Medium or Hard) and subject."
    )


def parse_questions(raw_json: str) -> list[Question]:
    """Validate a JSON array of generated questions and renumber them."""
    try:
        items = _QUESTION_LIST.validate_json(raw_json)
    except ValidationError as exc:
        raise GenerationFailure(f"Generated questions were malformed: {exc.error_count()} error(s)") from exc
    if not items:
        raise GenerationFailure("Question generator returned no questions.")
    try:
        return [item.to_question(index) for index, item in enumerate(items, start=1)]
    except InvalidInput as exc:
        raise GenerationFailure(str(exc)) from exc


class GeminiQuestionGenerator:
    """Generates a mock test with a Gemini model."""

    def __init__(
        self,
        model_name: str = DEFAULT_QUESTION_MODEL,
        timeout_seconds: float | None = None,
        model: Any | None = None,
    ) -> None:
        self._model_name = model_name
        self._timeout_seconds = timeout_seconds
        self._model = model if model is not None else genai.GenerativeModel(model_name)

    def generate_questions(self, exam_name: str, subject_name: str) -> list[Question]:
        prompt = build_question_prompt(exam_name, subject_name)
        logger.info("Requesting questions for %s / %s from %s", exam_name, subject_name, self._model_name)
        request_options = {"timeout": self._timeout_seconds} if self._timeout_seconds else None
        try:
            response = self._model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=list[QuestionSchema],
                ),
                request_options=request_options,
            )
            raw_text = response.text
        except Exception as exc:
            logger.error("Question generation failed: %s", exc)
            raise GenerationFailure("Question generator request failed.") from exc

        questions = parse_questions(raw_text)
        if len(questions) != EXPECTED_QUESTION_COUNT:
            logger.warning(
                "Expected %d questions, generator returned %d", EXPECTED_QUESTION_COUNT, len(questions)
            )
        return questions
