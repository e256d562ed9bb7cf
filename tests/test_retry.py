import threading
import time

import pytest

from scaletest.retry import Retrier


class Flaky:
    def __init__(self, failures):
        self.failures = failures
        self.calls = []

    def __call__(self):
        self.calls.append(time.monotonic())
        if len(self.calls) <= self.failures:
            raise ValueError(f"attempt {len(self.calls)}")
        return "done"


def test_success_first_try():
    func = Flaky(0)
    assert Retrier(attempts=3, delay=0.001).do(func) == "done"
    assert len(func.calls) == 1


def test_succeeds_after_failures():
    func = Flaky(2)
    assert Retrier(attempts=3, delay=0.001).do(func) == "done"
    assert len(func.calls) == 3


def test_all_attempts_fail_raises_last_error():
    func = Flaky(10)
    with pytest.raises(ValueError, match="attempt 4"):
        Retrier(attempts=4, delay=0.001).do(func)
    assert len(func.calls) == 4


def test_exponential_backoff_doubles_delay():
    func = Flaky(2)
    retrier = Retrier(attempts=3, delay=0.02, exp_backoff=True)
    retrier.do(func)
    first_gap = func.calls[1] - func.calls[0]
    second_gap = func.calls[2] - func.calls[1]
    assert first_gap >= 0.02
    assert second_gap >= 0.04
    assert retrier.delay == 0.02


def test_zero_attempts_never_calls():
    func = Flaky(0)
    assert Retrier(attempts=0, delay=0.001).do(func) is None
    assert func.calls == []


def test_timeout_raises():
    release = threading.Event()

    def blocked():
        release.wait(5)

    try:
        with pytest.raises(TimeoutError, match="context error"):
            Retrier(attempts=1, delay=0.001).do(blocked, timeout=0.05)
    finally:
        release.set()