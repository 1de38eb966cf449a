"""Shared test fixtures and utilities."""

import re
from io import StringIO
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

from cmdwatch.keys import KeyEvent
from cmdwatch.runner import CycleResult
from cmdwatch.session import TerminalSession

ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

# What tcgetattr hands back for a cooked terminal in these tests
COOKED_ATTRS = [0x2D02, 0x5, 0xBF, 0x8A3B, 38400, 38400, [0] * 32]


@pytest.fixture
def runner():
    """Click CLI test runner.

    Example:
        def test_command(runner):
            result = runner.invoke(main, ['echo', 'hi'])
            assert result.exit_code == 0
    """
    return CliRunner()


def make_console(width=80, height=24):
    """Rich console that records terminal output into a StringIO."""
    return Console(
        file=StringIO(),
        force_terminal=True,
        color_system="standard",
        legacy_windows=False,
        width=width,
        height=height,
    )


@pytest.fixture
def console():
    return make_console()


def plain(output: str) -> str:
    """Strip ANSI escape sequences from captured console output."""
    return ANSI_RE.sub("", output)


def make_result(stdout="", stderr=""):
    """Factory for a successful CycleResult."""
    return CycleResult(stdout=stdout, stderr=stderr, exit_succeeded=True, exit_code=0)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ScriptedReader:
    """Key reader that delivers events at fixed times on a FakeClock.

    Args:
        clock: FakeClock shared with the code under test
        events: List of (clock time, KeyEvent), in time order
        on_poll: Optional callback run at the start of every poll
    """

    def __init__(self, clock, events=None, on_poll=None):
        self.clock = clock
        self.events = list(events or [])
        self.on_poll = on_poll
        self.polls = 0

    def poll(self, timeout):
        self.polls += 1
        if self.on_poll is not None:
            self.on_poll(self)
        if self.events and self.events[0][0] <= self.clock.now + timeout:
            at, event = self.events.pop(0)
            self.clock.now = max(self.clock.now, at)
            return event
        self.clock.advance(timeout)
        return None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_tty():
    """Pretend stdin is a terminal and record termios calls.

    Yields the tcsetattr mock; its call list shows every mode change.
    """
    with (
        patch("cmdwatch.session.os.isatty", return_value=True),
        patch("cmdwatch.session.termios.tcgetattr", return_value=list(COOKED_ATTRS)),
        patch("cmdwatch.session.termios.tcsetattr") as mock_tcsetattr,
    ):
        yield mock_tcsetattr


@pytest.fixture
def session(console, fake_tty):
    """Terminal session on the fake tty, always exited at teardown."""
    session = TerminalSession(console, input_fd=0)
    yield session
    session.exit()


def key(code, ctrl=False):
    return KeyEvent(code, ctrl=ctrl)
