"""Tests for the fixed-rate periodic refresher."""

import logging
import threading
import time

import pytest

from kvsource.common.exceptions import KVSourceValueError
from kvsource.secret_vault.scheduler import PeriodicRefresher


@pytest.mark.parametrize("interval", [0, -1])
def test_non_positive_interval_is_rejected(interval):
    with pytest.raises(KVSourceValueError):
        PeriodicRefresher(lambda: None, interval)


def test_runs_repeatedly_until_stopped():
    fired = threading.Semaphore(0)
    refresher = PeriodicRefresher(fired.release, 0.02).start()
    try:
        for _ in range(3):
            assert fired.acquire(timeout=5)
    finally:
        refresher.stop(timeout=5)

    assert not refresher.running
    runs = refresher.runs
    time.sleep(0.1)
    assert refresher.runs == runs


def test_first_run_waits_one_interval():
    fired = threading.Event()
    refresher = PeriodicRefresher(fired.set, 10).start()
    try:
        assert not fired.wait(0.1)
    finally:
        refresher.stop(timeout=5)
    assert refresher.runs == 0


def test_failures_do_not_stop_the_schedule():
    calls = []
    done = threading.Event()

    def flaky():
        calls.append(1)
        if len(calls) >= 3:
            done.set()
        raise RuntimeError("vault unavailable")

    refresher = PeriodicRefresher(flaky, 0.02).start()
    try:
        assert done.wait(5)
    finally:
        refresher.stop(timeout=5)


def test_failure_is_logged_once_as_a_warning(caplog):
    done = threading.Event()

    def failing():
        done.set()
        raise RuntimeError("vault unavailable")

    caplog.set_level(logging.WARNING, logger="kvsource.secret_vault.scheduler")
    refresher = PeriodicRefresher(failing, 0.02).start()
    try:
        assert done.wait(5)
    finally:
        refresher.stop(timeout=5)

    records = [
        r for r in caplog.records
        if r.name == "kvsource.secret_vault.scheduler" and "refresh failed" in r.getMessage()
    ]
    assert records
    assert all(r.levelno == logging.WARNING for r in records)
    assert all(r.exc_info is None for r in records)
    assert records[0].error == "vault unavailable"


def test_start_twice_is_a_no_op():
    refresher = PeriodicRefresher(lambda: None, 10)
    try:
        refresher.start()
        thread = refresher._thread
        refresher.start()
        assert refresher._thread is thread
    finally:
        refresher.stop(timeout=5)


def test_stop_before_start_is_safe():
    refresher = PeriodicRefresher(lambda: None, 10)
    refresher.stop()
    assert not refresher.running


def test_overrun_coalesces_missed_firings():
    """A slow run is followed by one run at the next slot, not a burst."""
    now = [0.0]
    clock = lambda: now[0]
    stamps = []
    third_run = threading.Event()

    def slow_target():
        stamps.append(now[0])
        if len(stamps) == 1:
            now[0] += 3.5  # overruns three and a half intervals of 1.0
        if len(stamps) == 3:
            third_run.set()

    refresher = PeriodicRefresher(slow_target, 1.0, clock=clock)
    # drive the fake clock forward only through the target; waits are real but
    # capped by the Event, so push the clock to each slot before it is due
    original_wait = refresher._stop_event.wait

    def fast_wait(timeout=None):
        if refresher._stop_event.is_set():
            return True
        now[0] += timeout or 0.0
        return original_wait(0)

    refresher._stop_event.wait = fast_wait
    refresher.start()
    try:
        assert third_run.wait(5)
    finally:
        refresher.stop(timeout=5)

    # first at t=1, overrun to 4.5, missed slots 2,3,4 coalesced -> next at 5, then 6
    assert stamps[:3] == [1.0, 5.0, 6.0]
