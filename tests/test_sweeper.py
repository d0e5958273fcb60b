import time

import pytest

from sqlassist.preview.sweeper import PreviewSweeper


def test_run_once_evicts_expired(previews, clock, logger):
    old = previews.put("SELECT 1")
    clock.advance(3601)
    fresh = previews.put("SELECT 2")

    sweeper = PreviewSweeper(previews, 600, logger)
    assert sweeper.run_once() == [old]
    assert previews.get(fresh).query == "SELECT 2"


def test_background_thread_sweeps_and_stops(previews, clock, logger):
    previews.put("SELECT 1")
    clock.advance(3601)

    sweeper = PreviewSweeper(previews, 0.01, logger)
    sweeper.start()
    try:
        assert sweeper.is_running
        deadline = time.time() + 5
        while len(previews) and time.time() < deadline:
            time.sleep(0.01)
        assert len(previews) == 0
    finally:
        sweeper.stop()
    assert not sweeper.is_running


def test_sweep_errors_do_not_kill_the_thread(logger):
    class Flaky:
        calls = 0

        def sweep(self):
            Flaky.calls += 1
            if Flaky.calls == 1:
                raise RuntimeError("boom")
            return []

    sweeper = PreviewSweeper(Flaky(), 0.01, logger)
    sweeper.start()
    try:
        deadline = time.time() + 5
        while Flaky.calls < 3 and time.time() < deadline:
            time.sleep(0.01)
        assert Flaky.calls >= 3
        assert sweeper.is_running
    finally:
        sweeper.stop()


def test_invalid_interval(previews, logger):
    with pytest.raises(ValueError):
        PreviewSweeper(previews, 0, logger)
