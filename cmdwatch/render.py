"""Draw a watch frame onto a Rich console.

Every function here only queues writes; callers wrap them in ``with console:``
so the frame reaches the terminal in a single flush.
"""

from rich.console import Console, ConsoleOptions, RenderResult
from rich.control import Control
from rich.segment import Segment
from rich.text import Text

from cmdwatch.config import WatchConfig
from cmdwatch.runner import CycleResult

PROMPT = "> "
QUIT_MSG = "Press 'q' or 'Ctrl+C' to exit"

COMMAND_STYLE = "blink2"
INTERVAL_STYLE = "bold"
LABEL_STYLE = "bold underline"
QUIT_STYLE = "italic"


class RawOutput:
    """Captured output written as-is, carriage returns and bells included."""

    def __init__(self, text: str):
        self.text = text

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield Segment(self.text)
        yield Segment.line()


def interval_message(interval: int) -> str:
    return f"Interval: {interval}s"


def right_column(width: int, text: str) -> int:
    """Column where text must start to end at the right edge."""
    return max(width - len(text), 0)


def render_header(console: Console, config: WatchConfig) -> None:
    """Clear the screen and draw the command line with the interval on the right."""
    width = console.size.width
    message = interval_message(config.interval)

    console.control(Control.clear(), Control.home())
    console.print(Text(PROMPT), end="")
    console.print(Text(config.shell_command, style=COMMAND_STYLE), end="", soft_wrap=True)
    console.control(Control.move_to_column(right_column(width, message)))
    console.print(Text(message, style=INTERVAL_STYLE), end="", soft_wrap=True)
    console.line(2)


def render_body(console: Console, result: CycleResult) -> None:
    """Draw stdout under "Output:" and, only when there is any, stderr under "StdErr:"."""
    console.print(Text("Output:", style=LABEL_STYLE))
    console.print(RawOutput(result.stdout), soft_wrap=True)
    if result.stderr:
        console.print(Text("StdErr:", style=LABEL_STYLE))
        console.print(RawOutput(result.stderr), soft_wrap=True)


def render_footer(console: Console) -> None:
    width, height = console.size
    console.control(Control.move_to(right_column(width, QUIT_MSG), max(height - 1, 0)))
    console.print(Text(QUIT_MSG, style=QUIT_STYLE), end="", soft_wrap=True)


def render_frame(console: Console, config: WatchConfig, result: CycleResult) -> None:
    """Queue one complete full-screen frame."""
    render_header(console, config)
    render_body(console, result)
    render_footer(console)


def render_final(console: Console, config: WatchConfig, result: CycleResult) -> None:
    """Queue the last run's output for the normal screen, left behind on exit."""
    console.print(Text(PROMPT + config.shell_command), soft_wrap=True)
    console.line()
    render_body(console, result)
