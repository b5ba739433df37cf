"""Coaching tip generation backed by the Gemini API."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import google.generativeai as genai

from govtest.constants.exam_constants import DEFAULT_TIPS_MODEL, EMPTY_TIPS_TEXT
from govtest.core.errors import TipFailure

logger = logging.getLogger(__name__)


class TipGenerator(Protocol):
    def generate_tips(self, correct_count: int, total_count: int, subject_summary: str) -> str:
        ...


def build_tips_prompt(correct_count: int, total_count: int, subject_summary: str) -> str:
    return (
        "Based on a government job mock test result:\n"
        f"Score: {correct_count}/{total_count}\n"
        f"Subject performance: {subject_summary}\n\n"
        "Provide 3-4 bullet points of high-impact improvement tips for this student. "
        "Keep it concise and motivating."
    )


class GeminiTipGenerator:
    """Asks a Gemini model for short improvement tips."""

    def __init__(
        self,
        model_name: str = DEFAULT_TIPS_MODEL,
        timeout_seconds: float | None = None,
        model: Any | None = None,
    ) -> None:
        self._model_name = model_name
        self._timeout_seconds = timeout_seconds
        self._model = model if model is not None else genai.GenerativeModel(model_name)

    def generate_tips(self, correct_count: int, total_count: int, subject_summary: str) -> str:
        prompt = build_tips_prompt(correct_count, total_count, subject_summary)
        request_options = {"timeout": self._timeout_seconds} if self._timeout_seconds else None
        try:
            response = self._model.generate_content(prompt, request_options=request_options)
            text = response.text
        except Exception as exc:
            raise TipFailure("Tip generator request failed.") from exc
        return text.strip() if text and text.strip() else EMPTY_TIPS_TEXT
