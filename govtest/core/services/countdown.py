"""Background one-second ticker that drives a test's countdown."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Event, Lock, Thread

from govtest.constants.exam_constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class CountdownTicker:
    """Calls ``on_tick`` every interval on a daemon thread until cancelled.

    ``on_tick`` returns True while the ticker should keep going; returning
    False (or raising) stops the thread. ``cancel`` may be called any number
    of times and from any thread, including from inside ``on_tick``.
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        interval_seconds: float = TICK_INTERVAL_SECONDS,
        name: str = "CountdownTicker",
    ) -> None:
        self._on_tick = on_tick
        self._interval_seconds = interval_seconds
        self._cancelled = Event()
        self._lock = Lock()
        self._thread = Thread(target=self._run, name=name, daemon=True)
        self._started = False

    def start(self) -> None:
        with self._lock:
            if self._started:
                raise RuntimeError("Countdown ticker already started.")
            self._started = True
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()

    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval_seconds):
            try:
                keep_going = self._on_tick()
            except Exception:
                logger.exception("Countdown tick failed; stopping ticker.")
                keep_going = False
            if not keep_going:
                self._cancelled.set()
