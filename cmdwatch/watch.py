"""The watch loop: run, draw, wait for the interval or a quit key, repeat."""

import logging
import time

from rich.console import Console

from cmdwatch.config import WatchConfig
from cmdwatch.keys import KeyReader
from cmdwatch.render import render_final, render_frame
from cmdwatch.runner import run_command
from cmdwatch.session import TerminalSession

logger = logging.getLogger(__name__)


def wait_for_quit(reader: KeyReader, interval: float, clock=time.monotonic) -> bool:
    """Wait up to interval seconds for 'q' or Ctrl+C.

    Other keys are ignored and the wait resumes for the time left.

    Returns:
        True if the user asked to quit, False if the interval elapsed.
    """
    deadline = clock() + interval
    remaining = interval
    while remaining > 0:
        event = reader.poll(remaining)
        if event is not None and event.is_quit():
            return True
        remaining = deadline - clock()
    return False


class WatchLoop:
    """Runs the command every config.interval seconds until cancelled.

    Cancellation is only checked while waiting; a running command is never
    interrupted.
    """

    def __init__(
        self,
        config: WatchConfig,
        session: TerminalSession,
        reader: KeyReader,
        shell: str | None = None,
        clock=time.monotonic,
    ):
        self.config = config
        self.session = session
        self.console = session.console
        self.reader = reader
        self.shell = shell
        self.clock = clock
        self.frames = 0

    def run(self) -> None:
        while True:
            result = run_command(self.config, self.shell)

            with self.console:
                render_frame(self.console, self.config, result)
            self.frames += 1

            try:
                cancelled = wait_for_quit(self.reader, self.config.interval, self.clock)
            except KeyboardInterrupt:
                cancelled = True

            if cancelled:
                logger.info("Cancelled by user after %d runs", self.frames)
                with self.console:
                    self.session.leave_alt_screen()
                    render_final(self.console, self.config, result)
                return


def watch(
    config: WatchConfig,
    console: Console | None = None,
    shell: str | None = None,
    session: TerminalSession | None = None,
    reader: KeyReader | None = None,
) -> None:
    """Watch a command full-screen until the user presses 'q' or Ctrl+C.

    The terminal is restored before this returns or raises.

    Args:
        config: Command line and refresh interval
        console: Rich console to draw on (default: creates new one)
        shell: Optional shell program overriding sh / powershell
        session: Terminal session (default: one on console and stdin)
        reader: Key reader (default: one on the session's input)

    Raises:
        TerminalError: the terminal does not support full-screen raw mode
        SpawnError, ExecutionError, OutputDecodeError: the command could not
            be run, failed, or printed non-UTF-8 output
    """
    if console is None:
        console = Console()
    if session is None:
        session = TerminalSession(console)

    with session:
        if reader is None:
            reader = KeyReader(session.input_fd)
        loop = WatchLoop(config, session, reader, shell=shell)
        logger.info("Watching '%s' every %ds", config.shell_command, config.interval)
        loop.run()
