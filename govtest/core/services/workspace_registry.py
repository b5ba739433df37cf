"""In-memory mapping from browser workspace ids to their ExamManager."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
from threading import Lock
from uuid import uuid4

from govtest.constants.network_constants import DEFAULT_WORKSPACE_TIMEOUT_MINUTES
from govtest.core.exam_manager import ExamManager

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Workspace:
    manager: ExamManager
    last_seen: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkspaceRegistry:
    """Hands out one ExamManager per browser and forgets idle ones."""

    def __init__(
        self,
        manager_factory: Callable[[], ExamManager],
        timeout_minutes: int = DEFAULT_WORKSPACE_TIMEOUT_MINUTES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._manager_factory = manager_factory
        self._timeout = timedelta(minutes=timeout_minutes)
        self._clock = clock
        self._workspaces: dict[str, _Workspace] = {}
        self._lock = Lock()

    def get_or_create(self, workspace_id: str | None) -> tuple[str, ExamManager]:
        """Return the workspace for ``workspace_id``, creating a new one if unknown."""
        with self._lock:
            now = self._clock()
            expired = self._evict_expired(now)
            workspace = self._workspaces.get(workspace_id) if workspace_id else None
            if workspace is None:
                workspace_id = uuid4().hex
                workspace = _Workspace(manager=self._manager_factory(), last_seen=now)
                self._workspaces[workspace_id] = workspace
                logger.info("Created workspace %s", workspace_id)
            workspace.last_seen = now
        for manager in expired:
            manager.close()
        return workspace_id, workspace.manager

    def discard(self, workspace_id: str) -> None:
        with self._lock:
            workspace = self._workspaces.pop(workspace_id, None)
        if workspace is not None:
            workspace.manager.close()

    def count(self) -> int:
        with self._lock:
            return len(self._workspaces)

    def close_all(self) -> None:
        with self._lock:
            workspaces = list(self._workspaces.values())
            self._workspaces.clear()
        for workspace in workspaces:
            workspace.manager.close()

    def _evict_expired(self, now: datetime) -> list[ExamManager]:
        stale_ids = [
            workspace_id
            for workspace_id, workspace in self._workspaces.items()
            if now - workspace.last_seen > self._timeout
        ]
        for workspace_id in stale_ids:
            logger.info("Expiring idle workspace %s", workspace_id)
        return [self._workspaces.pop(workspace_id).manager for workspace_id in stale_ids]
