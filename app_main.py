"""Application entry point for GovTest AI."""

from __future__ import annotations

import sys

import google.generativeai as genai

from govtest.config import Settings, load_settings
from govtest.core.exam_manager import ExamManager
from govtest.core.gateways.question_generator import GeminiQuestionGenerator
from govtest.core.gateways.tip_generator import GeminiTipGenerator
from govtest.core.services.workspace_registry import WorkspaceRegistry
from govtest.server.api_server import create_api_app, run_api_server
from govtest.utils.logging_config import configure_logging


def build_registry(settings: Settings) -> WorkspaceRegistry:
    """Wire the Gemini gateways into a registry of per-browser exam managers."""
    genai.configure(api_key=settings.gemini_api_key)
    question_generator = GeminiQuestionGenerator(
        model_name=settings.question_model,
        timeout_seconds=settings.request_timeout_seconds,
    )
    tip_generator = GeminiTipGenerator(
        model_name=settings.tips_model,
        timeout_seconds=settings.request_timeout_seconds,
    )

    def manager_factory() -> ExamManager:
        return ExamManager(
            question_generator=question_generator,
            tip_generator=tip_generator,
            test_duration_seconds=settings.test_duration_seconds,
        )

    return WorkspaceRegistry(manager_factory, timeout_minutes=settings.workspace_timeout_minutes)


def main() -> None:
    """Initialize logging, build the app and serve it until interrupted."""
    settings = load_settings()
    logger = configure_logging(settings.log_level)
    if not settings.gemini_api_key:
        logger.error("GEMINI_API_KEY is not set; add it to the environment or a .env file.")
        sys.exit(1)

    logger.info("Starting GovTest AI...")
    app = create_api_app(build_registry(settings))
    logger.info("Trainer page available at http://%s:%d/", settings.host, settings.port)
    run_api_server(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
