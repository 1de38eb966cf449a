"""Run the watched command once and capture what it printed."""

import logging
import subprocess
import time
from dataclasses import dataclass

from cmdwatch.config import WatchConfig, shell_invocation
from cmdwatch.errors import ExecutionError, OutputDecodeError, SpawnError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Output of one run, with the whitespace envelope trimmed."""

    stdout: str
    stderr: str
    exit_succeeded: bool
    exit_code: int | None


def decode_output(data: bytes, stream: str) -> str:
    """Decode captured bytes as UTF-8 and trim leading/trailing whitespace."""
    try:
        return data.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise OutputDecodeError(stream, str(e)) from e


def run_command(config: WatchConfig, shell: str | None = None) -> CycleResult:
    """Run config.shell_command through the shell and wait for it to exit.

    There is no timeout: a command that never exits blocks the loop.

    Raises:
        SpawnError: the shell could not be launched
        ExecutionError: the command exited with a non-zero status
        OutputDecodeError: stdout or stderr is not valid UTF-8
    """
    argv = shell_invocation(config.shell_command, shell)
    logger.info("Running: %s", config.shell_command)

    started = time.monotonic()
    try:
        completed = subprocess.run(argv, stdin=subprocess.DEVNULL, capture_output=True, check=False)
    except OSError as e:
        raise SpawnError(argv[0], e.strerror or str(e)) from e
    logger.debug("Exited with %d after %.3fs", completed.returncode, time.monotonic() - started)

    if completed.returncode < 0:
        raise ExecutionError(None, signal=-completed.returncode)
    if completed.returncode != 0:
        raise ExecutionError(completed.returncode)

    return CycleResult(
        stdout=decode_output(completed.stdout, "stdout"),
        stderr=decode_output(completed.stderr, "stderr"),
        exit_succeeded=True,
        exit_code=completed.returncode,
    )
