from datetime import datetime, timedelta, timezone

from govtest.core.exam_manager import Screen
from govtest.core.services.workspace_registry import WorkspaceRegistry


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


def test_same_id_returns_same_manager(manager_factory):
    registry = WorkspaceRegistry(manager_factory)

    workspace_id, manager = registry.get_or_create(None)
    same_id, same_manager = registry.get_or_create(workspace_id)

    assert same_id == workspace_id
    assert same_manager is manager
    assert registry.count() == 1


def test_unknown_id_gets_a_fresh_workspace(manager_factory):
    registry = WorkspaceRegistry(manager_factory)

    workspace_id, _ = registry.get_or_create("forged-id")

    assert workspace_id != "forged-id"


def test_idle_workspaces_expire_and_stop_their_ticker(manager_factory, tickers):
    clock = FakeClock()
    registry = WorkspaceRegistry(manager_factory, timeout_minutes=10, clock=clock)
    old_id, old_manager = registry.get_or_create(None)
    old_manager.select_exam("ssc")
    old_manager.select_subject("gk")

    clock.now += timedelta(minutes=11)
    new_id, new_manager = registry.get_or_create(old_id)

    assert new_id != old_id
    assert new_manager.get_screen() is Screen.EXAM_SELECTION
    assert registry.count() == 1
    assert tickers[0].cancel_count == 1


def test_discard_and_close_all(manager_factory):
    registry = WorkspaceRegistry(manager_factory)
    first_id, _ = registry.get_or_create(None)
    registry.get_or_create(None)

    registry.discard(first_id)
    assert registry.count() == 1
    registry.close_all()
    assert registry.count() == 0
