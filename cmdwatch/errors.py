"""Error kinds raised by the watch session."""


class WatchError(Exception):
    """Base class for every fatal watch session error."""

    code = "WATCH_ERROR"
    hint = ""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        if hint is not None:
            self.hint = hint


class TerminalError(WatchError):
    """The terminal could not enter or leave full-screen raw mode."""

    code = "TERMINAL_ERROR"
    hint = "cmdwatch needs an interactive terminal on stdin and stdout"


class ExecutionError(WatchError):
    """The watched command exited unsuccessfully."""

    code = "COMMAND_FAILED"

    def __init__(self, exit_code: int | None, signal: int | None = None):
        if exit_code is not None:
            message = f"Command failed with exit code: {exit_code}"
        else:
            message = f"Command terminated by signal: {signal}"
        super().__init__(message)
        self.exit_code = exit_code
        self.signal = signal


class OutputDecodeError(WatchError):
    """Captured output is not valid UTF-8 text."""

    code = "DECODE_ERROR"
    hint = "The watched command must write UTF-8 text"

    def __init__(self, stream: str, reason: str):
        super().__init__(f"Could not decode {stream}: {reason}")
        self.stream = stream


class SpawnError(WatchError):
    """The shell interpreter could not be launched."""

    code = "SPAWN_ERROR"

    def __init__(self, program: str, reason: str):
        super().__init__(
            f"Failed to launch {program}: {reason}",
            hint=f"Check that '{program}' is installed and on PATH",
        )
        self.program = program
