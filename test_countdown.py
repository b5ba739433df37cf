from threading import Event

from govtest.core.services.countdown import CountdownTicker


def test_ticker_stops_when_callback_reports_done():
    ticks = []
    done = Event()

    def on_tick() -> bool:
        ticks.append(1)
        if len(ticks) == 3:
            done.set()
            return False
        return True

    ticker = CountdownTicker(on_tick, interval_seconds=0.01)
    ticker.start()

    assert done.wait(5)
    ticker.join(5)
    assert not ticker.is_alive()
    assert ticker.is_cancelled()
    assert len(ticks) == 3


def test_cancel_is_idempotent_and_stops_ticking():
    ticks = []
    ticker = CountdownTicker(lambda: ticks.append(1) or True, interval_seconds=0.01)
    ticker.start()

    ticker.cancel()
    ticker.cancel()
    ticker.join(5)

    assert not ticker.is_alive()
    count = len(ticks)
    ticker.join(0.05)
    assert len(ticks) == count


def test_failing_callback_stops_ticker():
    def on_tick() -> bool:
        raise RuntimeError("boom")

    ticker = CountdownTicker(on_tick, interval_seconds=0.01)
    ticker.start()
    ticker.join(5)

    assert not ticker.is_alive()
    assert ticker.is_cancelled()
