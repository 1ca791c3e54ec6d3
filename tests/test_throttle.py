"""Tests for the cancellable throttle."""

import pytest
from conftest import Clock

from gitexplorer import Throttle


@pytest.fixture
def calls():
    return []


@pytest.fixture
def throttled(calls, clock):
    return Throttle(calls.append, 1.0, clock=clock)


class TestThrottle:
    def test_leading_edge_runs_immediately(self, throttled, calls):
        throttled("a")
        assert calls == ["a"]
        assert not throttled.pending

    def test_calls_inside_window_are_queued(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        throttled("c")
        assert calls == ["a"]
        assert throttled.pending

    def test_poll_before_window_end_does_nothing(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        assert throttled.poll() is False
        assert calls == ["a"]

    def test_trailing_edge_uses_latest_args(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        throttled("c")
        clock.now = 1.0
        assert throttled.poll() is True
        assert calls == ["a", "c"]
        assert not throttled.pending

    def test_trailing_call_opens_new_window(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        clock.now = 1.0
        throttled.poll()
        clock.now = 1.5
        throttled("c")
        assert calls == ["a", "b"]
        assert throttled.pending

    def test_unpolled_trailing_call_fires_on_next_call(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        clock.now = 1.2
        throttled("c")
        assert calls == ["a", "b"]
        assert throttled.pending

    def test_cancel_drops_pending(self, throttled, calls, clock):
        throttled("a")
        clock.now = 0.5
        throttled("b")
        throttled.cancel()
        clock.now = 5.0
        assert throttled.poll() is False
        assert calls == ["a"]

    def test_cancel_resets_window(self, throttled, calls, clock):
        throttled("a")
        throttled.cancel()
        throttled("b")
        assert calls == ["a", "b"]

    def test_after_window_runs_immediately(self, throttled, calls, clock):
        throttled("a")
        clock.now = 2.0
        throttled("b")
        assert calls == ["a", "b"]

    def test_kwargs_forwarded(self, clock):
        seen = []
        t = Throttle(lambda *a, **kw: seen.append((a, kw)), 1.0, clock=clock)
        t(1, flag=True)
        assert seen == [((1,), {"flag": True})]

    def test_negative_wait(self):
        with pytest.raises(ValueError):
            Throttle(print, -1)

    def test_zero_wait_never_queues(self, calls):
        t = Throttle(calls.append, 0, clock=Clock())
        t("a")
        t("b")
        assert calls == ["a", "b"]
        assert not t.pending
