"""Screen flow for one trainee: selection, generation, test, analysis, results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import logging
from threading import Lock

from govtest.constants.exam_constants import (
    FALLBACK_TIPS_TEXT,
    TEST_DURATION_SECONDS,
    TICK_INTERVAL_SECONDS,
)
from govtest.constants.ui_constants import (
    ANALYZING_MESSAGE,
    GENERATING_QUESTIONS_TEMPLATE,
    GENERATION_FAILED_NOTICE,
    TIME_UP_NOTICE,
)
from govtest.core.errors import GenerationFailure, InvalidInput, InvalidStateTransition, TipFailure
from govtest.core.gateways.question_generator import QuestionGenerator
from govtest.core.gateways.tip_generator import TipGenerator
from govtest.core.models import Answer, ExamType, Question, Subject, TestResult
from govtest.core.services.catalog import ExamCatalog
from govtest.core.services.countdown import CountdownTicker
from govtest.core.services.exam_session import ExamSession, SessionState
from govtest.core.services.scoring import compute_result, count_correct, summarize_subjects

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    EXAM_SELECTION = "exam-selection"
    SUBJECT_SELECTION = "subject-selection"
    GENERATING = "generating"
    TESTING = "testing"
    ANALYZING = "analyzing"
    RESULTS = "results"


@dataclass(frozen=True, slots=True)
class ExamSnapshot:
    """Read-only view of everything the page needs to render a screen."""

    screen: Screen
    exam: ExamType | None
    subject: Subject | None
    notice: str | None
    loading_message: str | None
    session_state: SessionState | None
    questions: tuple[Question, ...]
    answers: tuple[Answer, ...]
    cursor: int
    bookmarks: frozenset[int]
    remaining_seconds: int | None
    result: TestResult | None


@dataclass(frozen=True, slots=True)
class _PendingAnalysis:
    generation: int
    questions: tuple[Question, ...]
    answers: tuple[Answer, ...]


TickerFactory = Callable[[Callable[[], bool]], CountdownTicker]


class ExamManager:
    """Facade that sequences the screens and owns the active ExamSession.

    Gateway calls run outside the lock so the page can keep polling state.
    Every run through subject selection bumps a generation counter; results
    that arrive for an older generation (the trainee restarted in the
    meantime) are dropped.
    """

    def __init__(
        self,
        question_generator: QuestionGenerator,
        tip_generator: TipGenerator,
        catalog: ExamCatalog | None = None,
        test_duration_seconds: int = TEST_DURATION_SECONDS,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        ticker_factory: TickerFactory | None = None,
    ) -> None:
        self._lock = Lock()
        self._question_generator = question_generator
        self._tip_generator = tip_generator
        self._catalog = catalog or ExamCatalog()
        self._test_duration_seconds = test_duration_seconds
        self._ticker_factory = ticker_factory or (
            lambda on_tick: CountdownTicker(on_tick, interval_seconds=tick_interval_seconds)
        )

        self._screen: Screen = Screen.EXAM_SELECTION
        self._exam: ExamType | None = None
        self._subject: Subject | None = None
        self._notice: str | None = None
        self._loading_message: str | None = None
        self._session: ExamSession | None = None
        self._ticker: CountdownTicker | None = None
        self._result: TestResult | None = None
        self._generation: int = 0

    @property
    def catalog(self) -> ExamCatalog:
        return self._catalog

    # --- Selection screens ---

    def select_exam(self, exam_id: str) -> ExamSnapshot:
        with self._lock:
            self._require_screen(Screen.EXAM_SELECTION, "select an exam")
            self._exam = self._catalog.get_exam(exam_id)
            self._notice = None
            self._screen = Screen.SUBJECT_SELECTION
            return self._snapshot()

    def back_to_exams(self) -> ExamSnapshot:
        with self._lock:
            self._require_screen(Screen.SUBJECT_SELECTION, "go back to exams")
            self._exam = None
            self._notice = None
            self._screen = Screen.EXAM_SELECTION
            return self._snapshot()

    def select_subject(self, subject_id: str) -> ExamSnapshot:
        """Generate a test for the chosen subject and start it.

        Blocks for the duration of the generator call. On failure the trainee
        lands back on subject selection with a notice.
        """
        with self._lock:
            self._require_screen(Screen.SUBJECT_SELECTION, "select a subject")
            subject = self._catalog.get_subject(subject_id)
            exam = self._exam
            if exam is None:  # pragma: no cover - SUBJECT_SELECTION implies an exam
                raise InvalidStateTransition("No exam selected.")
            self._subject = subject
            self._notice = None
            self._loading_message = GENERATING_QUESTIONS_TEMPLATE.format(subject=subject.name, exam=exam.name)
            self._screen = Screen.GENERATING
            self._generation += 1
            generation = self._generation

        try:
            questions = self._question_generator.generate_questions(exam.name, subject.name)
            session = ExamSession.start(questions, duration_seconds=self._test_duration_seconds)
        except (GenerationFailure, InvalidInput) as exc:
            logger.warning("Could not generate a test for %s / %s: %s", exam.name, subject.name, exc)
            return self._abandon_generation(generation)
        except Exception:
            logger.exception("Question generator failed unexpectedly for %s / %s", exam.name, subject.name)
            return self._abandon_generation(generation)

        with self._lock:
            if generation != self._generation or self._screen is not Screen.GENERATING:
                logger.info("Discarding question set for an abandoned generation %d", generation)
                return self._snapshot()
            logger.info("Starting %d question test for %s / %s", session.get_question_count(), exam.name, subject.name)
            self._session = session
            self._loading_message = None
            self._screen = Screen.TESTING
            self._ticker = self._ticker_factory(lambda: self._on_tick(generation))
            self._ticker.start()
            return self._snapshot()

    # --- Test screen ---

    def select_option(self, option_index: int) -> ExamSnapshot:
        with self._lock:
            self._require_session("select an option").select_option(option_index)
            return self._snapshot()

    def clear_answer(self) -> ExamSnapshot:
        with self._lock:
            self._require_session("clear an answer").clear_answer()
            return self._snapshot()

    def navigate(self, target_index: int) -> ExamSnapshot:
        with self._lock:
            self._require_session("navigate").navigate(target_index)
            return self._snapshot()

    def next_question(self) -> ExamSnapshot:
        with self._lock:
            self._require_session("navigate").next_question()
            return self._snapshot()

    def previous_question(self) -> ExamSnapshot:
        with self._lock:
            self._require_session("navigate").previous_question()
            return self._snapshot()

    def toggle_bookmark(self) -> ExamSnapshot:
        with self._lock:
            self._require_session("bookmark a question").toggle_bookmark()
            return self._snapshot()

    def request_submit(self) -> ExamSnapshot:
        with self._lock:
            self._require_session("submit").request_submit()
            return self._snapshot()

    def confirm_submit(self, confirmed: bool) -> ExamSnapshot:
        with self._lock:
            session = self._require_session("confirm submission")
            if session.confirm_submit(confirmed) is not SessionState.FINISHED:
                return self._snapshot()
            pending = self._begin_analysis()
        self._complete_analysis(pending)
        return self.snapshot()

    # --- Results & lifecycle ---

    def get_result(self) -> TestResult:
        with self._lock:
            if self._screen is not Screen.RESULTS or self._result is None:
                raise InvalidStateTransition("No result available before the test is analyzed.")
            return self._result

    def restart(self) -> ExamSnapshot:
        """Abandon whatever is in progress and go back to exam selection."""
        with self._lock:
            self._cancel_ticker()
            self._generation += 1
            self._screen = Screen.EXAM_SELECTION
            self._exam = None
            self._subject = None
            self._notice = None
            self._loading_message = None
            self._session = None
            self._result = None
            return self._snapshot()

    def close(self) -> None:
        with self._lock:
            self._cancel_ticker()
            self._generation += 1
            self._session = None

    def snapshot(self) -> ExamSnapshot:
        with self._lock:
            return self._snapshot()

    def get_screen(self) -> Screen:
        with self._lock:
            return self._screen

    # --- Internals (call with the lock held unless noted) ---

    def _on_tick(self, generation: int) -> bool:
        """Ticker callback, runs on the ticker thread."""
        with self._lock:
            session = self._session
            if generation != self._generation or session is None or not session.is_running():
                return False
            if not session.tick():
                return True
            logger.info("Time is up; submitting the test automatically.")
            pending = self._begin_analysis()
        self._complete_analysis(pending)
        return False

    def _begin_analysis(self) -> _PendingAnalysis:
        session = self._require_session("finish")
        answers = session.finish()
        self._cancel_ticker()
        self._notice = TIME_UP_NOTICE if session.is_timed_out() else None
        self._loading_message = ANALYZING_MESSAGE
        self._screen = Screen.ANALYZING
        self._session = None
        return _PendingAnalysis(
            generation=self._generation,
            questions=session.get_questions(),
            answers=answers,
        )

    def _abandon_generation(self, generation: int) -> ExamSnapshot:
        """Return to subject selection after a failed generation. Runs without the lock."""
        with self._lock:
            if generation == self._generation and self._screen is Screen.GENERATING:
                self._screen = Screen.SUBJECT_SELECTION
                self._loading_message = None
                self._notice = GENERATION_FAILED_NOTICE
            return self._snapshot()

    def _complete_analysis(self, pending: _PendingAnalysis) -> None:
        """Fetch tips and publish the result. Runs without the lock."""
        correct = count_correct(pending.answers)
        summary = summarize_subjects(pending.questions, pending.answers)
        try:
            tips = self._tip_generator.generate_tips(correct, len(pending.questions), summary)
        except TipFailure as exc:
            logger.warning("Falling back to default tips: %s", exc)
            tips = FALLBACK_TIPS_TEXT
        except Exception:
            logger.exception("Tip generator failed unexpectedly; using default tips")
            tips = FALLBACK_TIPS_TEXT
        result = compute_result(pending.questions, pending.answers, tips)

        with self._lock:
            if pending.generation != self._generation or self._screen is not Screen.ANALYZING:
                logger.info("Discarding result for an abandoned generation %d", pending.generation)
                return
            self._result = result
            self._loading_message = None
            self._screen = Screen.RESULTS
            logger.info(
                "Test scored %d/%d (accuracy %d%%)", result.score, result.total_questions, result.accuracy
            )

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _require_screen(self, expected: Screen, action: str) -> None:
        if self._screen is not expected:
            raise InvalidStateTransition(f"Cannot {action} on the {self._screen.value} screen.")

    def _require_session(self, action: str) -> ExamSession:
        self._require_screen(Screen.TESTING, action)
        if self._session is None:  # pragma: no cover - TESTING implies a session
            raise InvalidStateTransition("No test in progress.")
        return self._session

    def _snapshot(self) -> ExamSnapshot:
        session = self._session
        return ExamSnapshot(
            screen=self._screen,
            exam=self._exam,
            subject=self._subject,
            notice=self._notice,
            loading_message=self._loading_message,
            session_state=session.get_state() if session else None,
            questions=session.get_questions() if session else (),
            answers=tuple(session.get_answers()) if session else (),
            cursor=session.get_cursor() if session else 0,
            bookmarks=session.get_bookmarks() if session else frozenset(),
            remaining_seconds=session.get_remaining_seconds() if session else None,
            result=self._result,
        )
