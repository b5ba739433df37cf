"""Exam-related constants shared across the core and the server."""

OPTION_COUNT: int = 4
TEST_DURATION_SECONDS: int = 30 * 60
TICK_INTERVAL_SECONDS: float = 1.0
EXPECTED_QUESTION_COUNT: int = 40
DIFFICULTY_DISTRIBUTION: dict[str, int] = {"Easy": 10, "Medium": 20, "Hard": 10}

DEFAULT_QUESTION_MODEL: str = "gemini-2.5-pro"
DEFAULT_TIPS_MODEL: str = "gemini-2.0-flash"

EMPTY_TIPS_TEXT: str = "Keep practicing and focus on weak areas!"
FALLBACK_TIPS_TEXT: str = "Keep studying hard! Review your weak areas consistently."
