"""Text shown on the trainee page."""

PAGE_TITLE: str = "GovTest AI | Mock Test Trainer"

GENERATING_QUESTIONS_TEMPLATE: str = "Generating expert-level {subject} questions for {exam}..."
ANALYZING_MESSAGE: str = "AI is analyzing your performance..."
GENERATION_FAILED_NOTICE: str = "Failed to generate test. Please try again."
SUBMIT_CONFIRMATION_PROMPT: str = "Are you sure you want to finish the test?"
TIME_UP_NOTICE: str = "Time is up. Your test was submitted automatically."
