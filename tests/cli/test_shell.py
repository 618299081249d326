"""
Tests for the interactive shell session.

Durations are scaled down by 1000x so the 5 and 10 second demo tasks take
milliseconds.
"""

from __future__ import annotations

import io
import random

import pytest
from rich.console import Console

from proactor.cli.shell import RANDOM_COUNT, ShellSession
from proactor.dispatch import DispatcherState


@pytest.fixture()
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def session(make_dispatcher, buffer) -> ShellSession:
    out = Console(file=buffer, width=120, color_system=None)
    return ShellSession(make_dispatcher(3), scale=0.001, out=out, rng=random.Random(1))


class TestCommands:
    def test_help(self, session, buffer):
        assert session.handle("help") is True
        text = buffer.getvalue()
        assert "Proactor Pattern Example" in text
        for name in ("short", "shortres", "long", "longres", "random", "status", "quit"):
            assert name in text

    def test_unknown_command_shows_help(self, session, buffer):
        assert session.handle("frobnicate") is True
        assert "Use the following commands:" in buffer.getvalue()

    def test_short(self, session, buffer):
        assert session.handle("short") is True
        assert "5 seconds process queued" in buffer.getvalue()
        session.handle("quit")
        assert "Done: 1 completed, 0 failed" in buffer.getvalue()

    def test_long(self, session, buffer):
        session.handle("long")
        assert "10 seconds process queued" in buffer.getvalue()

    def test_shortres_prints_result(self, session, buffer):
        session.handle("shortres")
        assert "5 seconds process with result queued" in buffer.getvalue()
        session.handle("quit")
        assert "RESULT: 5" in buffer.getvalue()

    def test_longres_prints_result(self, session, buffer):
        session.handle("longres")
        session.handle("quit")
        text = buffer.getvalue()
        assert "10 seconds process with result queued" in text
        assert "RESULT: 10" in text

    def test_random(self, session, buffer):
        session.handle("random")
        assert f"Queued {RANDOM_COUNT} tasks" in buffer.getvalue()
        session.handle("quit")
        text = buffer.getvalue()
        assert text.count("ms finished") == RANDOM_COUNT
        assert f"Done: {RANDOM_COUNT} completed, 0 failed" in text

    def test_status(self, session, buffer):
        session.handle("status")
        text = buffer.getvalue()
        assert "slot" in text
        assert "free" in text
        assert "pending:" in text

    def test_commands_case_insensitive(self, session, buffer):
        session.handle("  SHORT ")
        assert "5 seconds process queued" in buffer.getvalue()

    def test_quit_stops_dispatcher(self, session, buffer):
        assert session.handle("quit") is False
        assert "Stopping dispatcher. Hang on..." in buffer.getvalue()
        assert session.dispatcher.state is DispatcherState.STOPPED


class TestRunLoop:
    def test_reads_until_quit(self, session, buffer):
        lines = iter(["shortres", "quit", "short"])
        session.run(lambda prompt: next(lines))
        text = buffer.getvalue()
        assert "RESULT: 5" in text
        assert "Done: 1 completed, 0 failed" in text
        assert "5 seconds process queued" not in text

    def test_eof_quits(self, session, buffer):
        def read_line(prompt):
            raise EOFError

        session.run(read_line)
        assert session.dispatcher.state is DispatcherState.STOPPED

    def test_ctrl_c_quits(self, session):
        def read_line(prompt):
            raise KeyboardInterrupt

        session.run(read_line)
        assert session.dispatcher.state is DispatcherState.STOPPED
