import threading
import time

import pytest

from matzip.pacing import NoPacer, Pacer


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_call_does_not_wait():
    clock = FakeClock()
    pacer = Pacer(0.8, clock=clock, sleep=clock.sleep)
    assert pacer.wait() == 0.0
    assert clock.sleeps == []


def test_back_to_back_calls_wait_full_interval():
    clock = FakeClock()
    pacer = Pacer(0.8, clock=clock, sleep=clock.sleep)
    pacer.wait()
    pacer.wait()
    assert clock.sleeps == [pytest.approx(0.8)]


def test_elapsed_time_counts_toward_interval():
    clock = FakeClock()
    pacer = Pacer(0.8, clock=clock, sleep=clock.sleep)
    pacer.wait()
    clock.now += 0.5
    assert pacer.wait() == pytest.approx(0.3)


def test_no_wait_after_window_passed():
    clock = FakeClock()
    pacer = Pacer(0.8, clock=clock, sleep=clock.sleep)
    pacer.wait()
    clock.now += 5
    assert pacer.wait() == 0.0
    assert clock.sleeps == []


def test_never_more_than_one_call_per_window():
    clock = FakeClock()
    pacer = Pacer(0.3, clock=clock, sleep=clock.sleep)
    stamps = []
    for _ in range(5):
        pacer.wait()
        stamps.append(clock.now)
    gaps = [b - a for a, b in zip(stamps, stamps[1:])]
    assert all(gap >= 0.3 - 1e-9 for gap in gaps)


def test_backoff_sleeps_and_restarts_window():
    clock = FakeClock()
    pacer = Pacer(0.8, clock=clock, sleep=clock.sleep)
    pacer.wait()
    pacer.backoff(2.0)
    assert clock.sleeps == [2.0]
    pacer.wait()
    assert clock.sleeps[-1] == pytest.approx(0.8)


def test_no_pacer_never_sleeps():
    pacer = NoPacer()
    for _ in range(3):
        assert pacer.wait() == 0.0


class ThreadedClock(FakeClock):
    """Fake clock whose sleep yields to other threads and tracks overlap."""

    def __init__(self):
        super().__init__()
        self._guard = threading.Lock()
        self.sleeping = 0
        self.max_sleeping = 0

    def __call__(self):
        with self._guard:
            return self.now

    def sleep(self, seconds):
        with self._guard:
            self.sleeping += 1
            self.max_sleeping = max(self.max_sleeping, self.sleeping)
        time.sleep(0.01)
        with self._guard:
            self.sleeping -= 1
            self.sleeps.append(seconds)
            self.now += seconds


def test_threads_sharing_a_pacer_wait_their_turn():
    clock = ThreadedClock()
    pacer = Pacer(0.5, clock=clock, sleep=clock.sleep)
    barrier = threading.Barrier(4)

    def call():
        barrier.wait()
        pacer.wait()

    threads = [threading.Thread(target=call) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert clock.max_sleeping == 1
    assert clock.sleeps == [pytest.approx(0.5)] * 3
    assert clock.now == pytest.approx(101.5)
