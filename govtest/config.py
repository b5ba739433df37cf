"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from govtest.constants.exam_constants import (
    DEFAULT_QUESTION_MODEL,
    DEFAULT_TIPS_MODEL,
    TEST_DURATION_SECONDS,
)
from govtest.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_WORKSPACE_TIMEOUT_MINUTES,
)


@dataclass(frozen=True, slots=True)
class Settings:
    gemini_api_key: str | None = None
    question_model: str = DEFAULT_QUESTION_MODEL
    tips_model: str = DEFAULT_TIPS_MODEL
    request_timeout_seconds: float = 120.0
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    test_duration_seconds: int = TEST_DURATION_SECONDS
    workspace_timeout_minutes: int = DEFAULT_WORKSPACE_TIMEOUT_MINUTES


def load_settings(env_file: str | None = None) -> Settings:
    """Build settings from ``GOVTEST_*`` variables and ``GEMINI_API_KEY``."""
    load_dotenv(env_file)
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        question_model=os.getenv("GOVTEST_QUESTION_MODEL", DEFAULT_QUESTION_MODEL),
        tips_model=os.getenv("GOVTEST_TIPS_MODEL", DEFAULT_TIPS_MODEL),
        request_timeout_seconds=_env_float("GOVTEST_REQUEST_TIMEOUT_SECONDS", 120.0),
        host=os.getenv("GOVTEST_HOST", DEFAULT_HOST),
        port=_env_int("GOVTEST_PORT", DEFAULT_PORT),
        log_level=os.getenv("GOVTEST_LOG_LEVEL", "INFO").upper(),
        test_duration_seconds=_env_int("GOVTEST_TEST_DURATION_SECONDS", TEST_DURATION_SECONDS),
        workspace_timeout_minutes=_env_int(
            "GOVTEST_WORKSPACE_TIMEOUT_MINUTES", DEFAULT_WORKSPACE_TIMEOUT_MINUTES
        ),
    )


def _env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return default
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw_value}'.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer.")
    return value


def _env_float(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if not raw_value:
        return default
    try:
        return float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{raw_value}'.") from exc
