"""Semantic exit codes for machine-readable CLI results."""

from cmdwatch.errors import (
    ExecutionError,
    OutputDecodeError,
    SpawnError,
    TerminalError,
)

# Success, including cancellation with 'q' or Ctrl+C
SUCCESS = 0

# General/unexpected error
GENERAL_ERROR = 1

# Terminal could not switch into (or out of) full-screen raw mode
TERMINAL_ERROR = 2

# Watched command exited with a non-zero status
COMMAND_FAILED = 3

# Watched command wrote output that is not valid UTF-8
DECODE_ERROR = 4

# Shell interpreter could not be launched
SPAWN_ERROR = 5

# Invalid configuration
VALIDATION_ERROR = 6


def exit_code_for_error(error: BaseException) -> int:
    """Map an exception to a semantic exit code.

    Args:
        error: Exception that ended the watch session

    Returns:
        Semantic exit code
    """
    if isinstance(error, TerminalError):
        return TERMINAL_ERROR
    elif isinstance(error, ExecutionError):
        return COMMAND_FAILED
    elif isinstance(error, OutputDecodeError):
        return DECODE_ERROR
    elif isinstance(error, SpawnError):
        return SPAWN_ERROR
    else:
        return GENERAL_ERROR
