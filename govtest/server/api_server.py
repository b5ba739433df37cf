"""FastAPI server that exposes the trainer screens to the browser."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from govtest.constants.about import APP_NAME, APP_VERSION
from govtest.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    WORKSPACE_COOKIE,
    WORKSPACE_COOKIE_MAX_AGE_SECONDS,
)
from govtest.core.exam_manager import ExamManager, ExamSnapshot, Screen
from govtest.core.markdown_math_renderer import renderer
from govtest.core.models import ExamType, Question, Subject, TestResult
from govtest.core.services.workspace_registry import WorkspaceRegistry
from govtest.server.trainee_page import TRAINEE_PAGE_HTML


class ExamPayload(BaseModel):
    exam_id: str


class SubjectPayload(BaseModel):
    subject_id: str


class OptionPayload(BaseModel):
    option_index: int


class NavigatePayload(BaseModel):
    index: int


class ConfirmPayload(BaseModel):
    """Answer to the "are you sure you want to finish" prompt."""

    confirmed: bool


def _exam_to_dict(exam: ExamType | None) -> dict[str, object] | None:
    if exam is None:
        return None
    return {"id": exam.id, "name": exam.name, "description": exam.description, "icon": exam.icon}


def _subject_to_dict(subject: Subject | None) -> dict[str, object] | None:
    if subject is None:
        return None
    return {"id": subject.id, "name": subject.name, "icon": subject.icon}


def _question_to_dict(question: Question, number: int) -> dict[str, object]:
    # Correct answer and explanation stay hidden until the result screen.
    return {
        "id": question.id,
        "number": number,
        "question_html": renderer.render_fragment(question.text),
        "options_html": [renderer.render_inline(option) for option in question.options],
        "difficulty": question.difficulty.value,
        "subject": question.subject,
    }


def _test_to_dict(snapshot: ExamSnapshot) -> dict[str, object] | None:
    if snapshot.screen is not Screen.TESTING or not snapshot.questions:
        return None
    cursor = snapshot.cursor
    current_answer = snapshot.answers[cursor]
    return {
        "session_state": snapshot.session_state.value if snapshot.session_state else None,
        "remaining_seconds": snapshot.remaining_seconds,
        "question_count": len(snapshot.questions),
        "answered_count": sum(1 for a in snapshot.answers if a.selected_option is not None),
        "cursor": cursor,
        "question_map": [
            {
                "number": index + 1,
                "answered": answer.selected_option is not None,
                "bookmarked": index in snapshot.bookmarks,
                "current": index == cursor,
            }
            for index, answer in enumerate(snapshot.answers)
        ],
        "question": _question_to_dict(snapshot.questions[cursor], cursor + 1),
        "selected_option": current_answer.selected_option,
        "bookmarked": cursor in snapshot.bookmarks,
    }


def result_to_dict(result: TestResult) -> dict[str, object]:
    return {
        "score": result.score,
        "total_questions": result.total_questions,
        "correct_answers": result.correct_answers,
        "incorrect_answers": result.incorrect_answers,
        "skipped_answers": result.skipped_answers,
        "accuracy": result.accuracy,
        "subject_analysis": [
            {"subject": subject, "correct": tally.correct, "total": tally.total, "accuracy": tally.accuracy}
            for subject, tally in result.subject_analysis.items()
        ],
        "ai_tips": result.ai_tips,
        "ai_tips_html": renderer.render_fragment(result.ai_tips),
        "reviews": [
            {
                "number": review.number,
                "question_html": renderer.render_fragment(review.question.text),
                "options_html": [renderer.render_inline(option) for option in review.question.options],
                "correct_answer": review.question.correct_answer,
                "selected_option": review.answer.selected_option,
                "status": review.status.value,
                "explanation_html": renderer.render_fragment(review.question.explanation),
                "difficulty": review.question.difficulty.value,
                "subject": review.question.subject,
            }
            for review in result.reviews
        ],
    }


def snapshot_to_dict(snapshot: ExamSnapshot) -> dict[str, object]:
    return {
        "screen": snapshot.screen.value,
        "exam": _exam_to_dict(snapshot.exam),
        "subject": _subject_to_dict(snapshot.subject),
        "notice": snapshot.notice,
        "loading_message": snapshot.loading_message,
        "test": _test_to_dict(snapshot),
        "result_available": snapshot.result is not None and snapshot.screen is Screen.RESULTS,
    }


def _apply(action: Callable[[], ExamSnapshot]) -> dict[str, object]:
    try:
        snapshot = action()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return snapshot_to_dict(snapshot)


def _get_workspace_dependency(registry: WorkspaceRegistry):
    def dependency(request: Request, response: Response) -> ExamManager:
        requested_id = request.cookies.get(WORKSPACE_COOKIE)
        workspace_id, manager = registry.get_or_create(requested_id)
        if workspace_id != requested_id:
            response.set_cookie(
                key=WORKSPACE_COOKIE,
                value=workspace_id,
                max_age=WORKSPACE_COOKIE_MAX_AGE_SECONDS,
                samesite="lax",
                httponly=True,
            )
        return manager

    return dependency


def create_api_app(registry: WorkspaceRegistry) -> FastAPI:
    """Create a FastAPI application wired to the provided workspace registry."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        registry.close_all()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    workspace_dep = _get_workspace_dependency(registry)

    @app.get("/", response_class=HTMLResponse)
    def serve_trainee_page() -> str:
        return TRAINEE_PAGE_HTML

    @app.get("/catalog")
    def get_catalog(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return {
            "exams": [_exam_to_dict(exam) for exam in manager.catalog.get_exam_types()],
            "subjects": [_subject_to_dict(subject) for subject in manager.catalog.get_subjects()],
        }

    @app.get("/state")
    def get_state(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return snapshot_to_dict(manager.snapshot())

    @app.post("/exam")
    def select_exam(payload: ExamPayload, manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(lambda: manager.select_exam(payload.exam_id))

    @app.post("/exam/back")
    def back_to_exams(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.back_to_exams)

    @app.post("/subject")
    def select_subject(payload: SubjectPayload, manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(lambda: manager.select_subject(payload.subject_id))

    @app.post("/answer")
    def select_option(payload: OptionPayload, manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(lambda: manager.select_option(payload.option_index))

    @app.delete("/answer")
    def clear_answer(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.clear_answer)

    @app.post("/navigate")
    def navigate(payload: NavigatePayload, manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(lambda: manager.navigate(payload.index))

    @app.post("/navigate/next")
    def next_question(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.next_question)

    @app.post("/navigate/previous")
    def previous_question(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.previous_question)

    @app.post("/bookmark")
    def toggle_bookmark(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.toggle_bookmark)

    @app.post("/submit")
    def request_submit(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.request_submit)

    @app.post("/submit/confirm")
    def confirm_submit(payload: ConfirmPayload, manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(lambda: manager.confirm_submit(payload.confirmed))

    @app.post("/restart")
    def restart(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        return _apply(manager.restart)

    @app.get("/result")
    def get_result(manager: ExamManager = Depends(workspace_dep)) -> dict[str, object]:
        try:
            result = manager.get_result()
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return result_to_dict(result)

    return app


def run_api_server(
    app: FastAPI,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the app with uvicorn until interrupted."""
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level)
    server = uvicorn.Server(config)
    server.run()
