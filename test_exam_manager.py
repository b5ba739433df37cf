import pytest

from govtest.constants.exam_constants import FALLBACK_TIPS_TEXT
from govtest.constants.ui_constants import GENERATION_FAILED_NOTICE, TIME_UP_NOTICE
from govtest.core.errors import InvalidInput, InvalidStateTransition
from govtest.core.exam_manager import Screen
from govtest.core.services.exam_session import SessionState


def _start_test(manager):
    manager.select_exam("ssc")
    return manager.select_subject("reasoning")


def test_happy_path_through_all_screens(manager_factory, question_generator, tip_generator, tickers):
    manager = manager_factory()

    assert manager.snapshot().screen is Screen.EXAM_SELECTION
    assert manager.select_exam("ssc").screen is Screen.SUBJECT_SELECTION
    snapshot = manager.select_subject("reasoning")

    assert question_generator.calls == [("SSC CGL/CHSL", "Logical Reasoning")]
    assert snapshot.screen is Screen.TESTING
    assert snapshot.session_state is SessionState.ACTIVE
    assert len(snapshot.answers) == len(snapshot.questions) == 3
    assert tickers[0].started

    manager.select_option(1)
    manager.navigate(2)
    manager.select_option(1)
    manager.toggle_bookmark()
    assert manager.snapshot().bookmarks == frozenset({2})

    manager.request_submit()
    snapshot = manager.confirm_submit(True)

    assert snapshot.screen is Screen.RESULTS
    assert tickers[0].cancel_count == 1
    assert tip_generator.calls == [(1, 3, "General Knowledge: 1/3")]
    result = manager.get_result()
    assert (result.correct_answers, result.incorrect_answers, result.skipped_answers) == (1, 1, 1)
    assert result.accuracy == 50
    assert result.ai_tips.startswith("- Revise")


def test_generation_failure_returns_to_subject_selection(manager_factory, question_generator):
    question_generator.fail = True
    manager = manager_factory()

    snapshot = _start_test(manager)

    assert snapshot.screen is Screen.SUBJECT_SELECTION
    assert snapshot.notice == GENERATION_FAILED_NOTICE
    assert snapshot.questions == ()

    question_generator.fail = False
    snapshot = manager.select_subject("reasoning")
    assert snapshot.screen is Screen.TESTING
    assert snapshot.notice is None


def test_empty_question_set_is_treated_as_generation_failure(manager_factory, question_generator):
    question_generator.questions = []
    manager = manager_factory()

    assert _start_test(manager).notice == GENERATION_FAILED_NOTICE


def test_tip_failure_uses_fallback_text(manager_factory, tip_generator):
    tip_generator.fail = True
    manager = manager_factory()
    _start_test(manager)

    manager.request_submit()
    manager.confirm_submit(True)

    assert manager.get_result().ai_tips == FALLBACK_TIPS_TEXT


def test_declined_submission_keeps_testing(manager_factory, tickers):
    manager = manager_factory()
    _start_test(manager)
    manager.select_option(2)

    manager.request_submit()
    snapshot = manager.confirm_submit(False)

    assert snapshot.screen is Screen.TESTING
    assert snapshot.session_state is SessionState.ACTIVE
    assert snapshot.answers[0].selected_option == 2
    assert tickers[0].cancel_count == 0


def test_timeout_submits_without_confirmation(manager_factory, tickers):
    manager = manager_factory(test_duration_seconds=3)
    _start_test(manager)
    manager.select_option(1)

    assert tickers[0].fire(2) is True
    assert manager.snapshot().remaining_seconds == 1
    assert tickers[0].fire() is False

    snapshot = manager.snapshot()
    assert snapshot.screen is Screen.RESULTS
    assert snapshot.notice == TIME_UP_NOTICE
    assert tickers[0].cancel_count == 1
    assert manager.get_result().correct_answers == 1
    # A late tick from the stopped thread is ignored.
    assert tickers[0].on_tick() is False


def test_restart_discards_results_from_abandoned_generation(manager_factory, question_generator):
    manager = manager_factory()
    question_generator.before_return = manager.restart

    snapshot = _start_test(manager)

    assert snapshot.screen is Screen.EXAM_SELECTION
    assert manager.snapshot().questions == ()


def test_restart_mid_test_cancels_ticker(manager_factory, tickers):
    manager = manager_factory()
    _start_test(manager)

    snapshot = manager.restart()

    assert snapshot.screen is Screen.EXAM_SELECTION
    assert snapshot.exam is None
    assert tickers[0].cancel_count == 1
    assert tickers[0].on_tick() is False


def test_screen_guards(manager_factory):
    manager = manager_factory()

    with pytest.raises(InvalidStateTransition):
        manager.select_subject("reasoning")
    with pytest.raises(InvalidStateTransition):
        manager.select_option(0)
    with pytest.raises(InvalidStateTransition):
        manager.get_result()
    with pytest.raises(InvalidInput):
        manager.select_exam("unknown")

    manager.select_exam("ssc")
    with pytest.raises(InvalidStateTransition):
        manager.select_exam("upsc")
    assert manager.back_to_exams().screen is Screen.EXAM_SELECTION


def test_full_length_subject_passes_name_through(manager_factory, question_generator):
    manager = manager_factory()
    manager.select_exam("upsc")

    manager.select_subject("full")

    assert question_generator.calls == [("UPSC CSE (Prelims)", "Full Length Test")]


def test_unexpected_generator_error_still_leaves_generating(manager_factory, question_generator, tickers):
    def broken_gateway():
        raise KeyError("candidates")

    question_generator.before_return = broken_gateway
    manager = manager_factory()

    snapshot = _start_test(manager)

    assert snapshot.screen is Screen.SUBJECT_SELECTION
    assert snapshot.notice == GENERATION_FAILED_NOTICE
    assert tickers == []


def test_unexpected_tip_error_still_reaches_results(manager_factory, tip_generator, monkeypatch):
    def broken_tips(correct_count, total_count, subject_summary):
        raise AttributeError("text")

    monkeypatch.setattr(tip_generator, "generate_tips", broken_tips)
    manager = manager_factory()
    _start_test(manager)
    manager.request_submit()

    assert manager.confirm_submit(True).screen is Screen.RESULTS
    assert manager.get_result().ai_tips == FALLBACK_TIPS_TEXT
