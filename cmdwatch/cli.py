"""Main CLI entry point for cmdwatch."""

import sys

import click
from rich.console import Console

from cmdwatch import __version__
from cmdwatch.config import LOG_LEVELS, WatchConfig, configure_logging, load_settings
from cmdwatch.utils.error import handle_watch_error
from cmdwatch.utils.exit_codes import VALIDATION_ERROR
from cmdwatch.utils.output import emit_error, set_output_format
from cmdwatch.watch import watch

console = Console()


@handle_watch_error
def run_watch(config: WatchConfig, shell: str | None = None) -> None:
    """Run the watch session, turning its errors into exit codes."""
    watch(config, console=console, shell=shell)


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.version_option(version=__version__, prog_name="cmdwatch")
@click.option(
    "-i",
    "--interval",
    type=click.IntRange(min=1),
    default=None,
    metavar="SEC",
    help="The interval to run the command, in seconds (default: 5).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write diagnostic logs to this file.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level for --log-file (default: WARNING).",
)
@click.option("--json-errors", is_flag=True, default=False, help="Report errors as JSON on stderr")
@click.argument("command")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(interval, log_file, log_level, json_errors, command, args):
    """Run COMMAND every few seconds and show its output full-screen.

    ARGS are appended to COMMAND with single spaces and the whole line is run
    by the shell (sh -c, or powershell -Command on Windows). Press 'q' or
    Ctrl+C to stop; the last output stays on screen.

    Configuration:
        CMDWATCH_INTERVAL - Default interval in seconds (default: 5)
        CMDWATCH_SHELL - Shell program to use instead of sh / powershell
        CMDWATCH_LOG_FILE - Diagnostic log file
        CMDWATCH_LOG_LEVEL - Log level (default: WARNING)

    Examples:
        cmdwatch ls -l
        cmdwatch -i 1 date
        cmdwatch --interval 10 "df -h | grep /dev"
    """
    if json_errors:
        set_output_format("json")
    settings = load_settings()
    log_file = log_file or settings.log_file
    try:
        configure_logging(log_file, log_level or settings.log_level)
    except OSError as e:
        emit_error(
            "LOG_FILE_ERROR",
            f"Cannot open log file {log_file}: {e.strerror or e}",
            "Check --log-file or CMDWATCH_LOG_FILE",
        )
        sys.exit(VALIDATION_ERROR)

    config = WatchConfig.from_args(command, args, interval or settings.interval)
    run_watch(config, shell=settings.shell)


if __name__ == "__main__":
    main()
