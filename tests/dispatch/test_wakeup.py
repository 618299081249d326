"""Tests for WakeupSignal."""

from __future__ import annotations

import threading
import time

from proactor.dispatch import WakeupSignal


class TestWakeupSignal:
    def test_wait_times_out_without_set(self):
        signal = WakeupSignal()
        start = time.monotonic()
        assert signal.wait(0.05) is False
        assert time.monotonic() - start >= 0.04

    def test_set_before_wait_returns_immediately(self):
        signal = WakeupSignal()
        signal.set()
        assert signal.is_set()
        assert signal.wait(5) is True

    def test_auto_reset(self):
        signal = WakeupSignal()
        signal.set()
        signal.wait(1)
        assert not signal.is_set()
        assert signal.wait(0.01) is False

    def test_coalesces(self):
        signal = WakeupSignal()
        for _ in range(5):
            signal.set()
        assert signal.wait(1) is True
        assert signal.wait(0.01) is False

    def test_wakes_waiting_thread(self):
        signal = WakeupSignal()
        woke: list[bool] = []
        waiter = threading.Thread(target=lambda: woke.append(signal.wait(5)))
        waiter.start()
        time.sleep(0.02)
        signal.set()
        waiter.join(timeout=5)
        assert woke == [True]
