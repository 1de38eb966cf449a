"""Terminal session: full-screen raw mode entered once and always restored."""

import logging
import os
import signal
import sys

from rich.console import Console

from cmdwatch.errors import TerminalError
from cmdwatch.utils.output import emit_error

IS_WINDOWS = sys.platform == "win32"

if IS_WINDOWS:
    termios = None
else:
    import termios

logger = logging.getLogger(__name__)

# DECAWM: the terminal wraps text that reaches the right margin
ENABLE_LINE_WRAP = "\x1b[?7h"

# Signals that would otherwise kill the process without restoring the terminal
RESTORE_SIGNALS = () if IS_WINDOWS else (signal.SIGTERM, signal.SIGHUP)


def raw_mode_attrs(attrs: list) -> list:
    """Return a copy of termios attrs with raw key delivery enabled.

    Output post-processing is left on so newlines still return the carriage.
    """
    raw = list(attrs)
    raw[6] = list(attrs[6])
    raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    raw[6][termios.VMIN] = 1
    raw[6][termios.VTIME] = 0
    return raw


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


class TerminalSession:
    """Owns the alternate screen, cursor visibility and raw keyboard mode.

    Use as a context manager so the terminal is restored on every way out,
    including errors and SIGTERM/SIGHUP.
    """

    def __init__(self, console: Console, input_fd: int | None = None):
        self.console = console
        self.input_fd = input_fd
        self.active = False
        self._saved_attrs = None
        self._saved_handlers = {}

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self.exit()
        except TerminalError as restore_error:
            if exc is None:
                raise
            # The error already unwinding takes precedence
            logger.error(
                "Terminal restore failed while handling %s: %s",
                exc_type.__name__,
                restore_error.message,
            )
            emit_error(restore_error.code, restore_error.message, restore_error.hint)
        return False

    def enter(self) -> None:
        """Switch to the alternate screen with a hidden cursor and raw input."""
        if self.active:
            return
        if not self.console.is_terminal:
            raise TerminalError("Output is not a terminal")

        fd = self._resolve_input_fd()
        if not os.isatty(fd):
            raise TerminalError("Input is not a terminal")

        self._enable_raw_mode(fd)
        try:
            self.console.show_cursor(False)
            self.console.set_alt_screen(True)
            self._write_sequence(ENABLE_LINE_WRAP)
        except OSError as e:
            self._disable_raw_mode()
            raise TerminalError(f"Failed to enter full-screen mode: {e}") from e

        self._install_signal_handlers()
        self.active = True
        logger.debug("Entered terminal session on fd %d", fd)

    def leave_alt_screen(self) -> None:
        """Return to the normal screen while keeping the session open."""
        if self.console.is_alt_screen:
            self.console.set_alt_screen(False)

    def exit(self) -> None:
        """Restore the terminal. Runs its effects at most once per enter()."""
        if not self.active:
            return
        self.active = False
        self._restore_signal_handlers()

        failures = []
        try:
            self._disable_raw_mode()
        except termios.error as e:
            failures.append(f"input mode: {e}")
        try:
            self.console.show_cursor(True)
            self.leave_alt_screen()
            self._write_sequence(ENABLE_LINE_WRAP)
        except OSError as e:
            failures.append(f"display mode: {e}")

        if failures:
            raise TerminalError("Failed to restore terminal (" + "; ".join(failures) + ")")
        logger.debug("Restored terminal")

    def _resolve_input_fd(self) -> int:
        if self.input_fd is None:
            try:
                self.input_fd = sys.stdin.fileno()
            except (AttributeError, ValueError, OSError) as e:
                raise TerminalError(f"Input is not a terminal: {e}") from e
        return self.input_fd

    def _enable_raw_mode(self, fd: int) -> None:
        if termios is None:
            return
        try:
            self._saved_attrs = termios.tcgetattr(fd)
            termios.tcsetattr(fd, termios.TCSAFLUSH, raw_mode_attrs(self._saved_attrs))
        except termios.error as e:
            self._saved_attrs = None
            raise TerminalError(f"Failed to enable raw mode: {e}") from e

    def _disable_raw_mode(self) -> None:
        if termios is None or self._saved_attrs is None:
            return
        saved, self._saved_attrs = self._saved_attrs, None
        termios.tcsetattr(self.input_fd, termios.TCSADRAIN, saved)

    def _write_sequence(self, sequence: str) -> None:
        self.console.file.write(sequence)
        self.console.file.flush()

    def _install_signal_handlers(self) -> None:
        for signum in RESTORE_SIGNALS:
            try:
                self._saved_handlers[signum] = signal.signal(signum, _raise_exit)
            except ValueError:
                # Not the main thread
                logger.debug("Cannot install handler for signal %d", signum)

    def _restore_signal_handlers(self) -> None:
        while self._saved_handlers:
            signum, handler = self._saved_handlers.popitem()
            signal.signal(signum, handler)
