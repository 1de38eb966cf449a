"""Error output format utilities."""

import json
import sys

# Global error output format state
_output_format = "text"


def set_output_format(fmt: str) -> None:
    """Set the global error output format ("text" or "json")."""
    global _output_format
    _output_format = fmt


def get_output_format() -> str:
    """Get the current error output format."""
    return _output_format


def emit_error(code: str, message: str, hint: str = "", exit_code: int | None = None) -> None:
    """Emit an error in the appropriate format.

    In JSON mode, outputs structured JSON to stderr.
    In text mode, uses Rich console for pretty output.
    """
    if _output_format == "json":
        error_obj = {
            "error": True,
            "code": code,
            "message": message,
        }
        if exit_code is not None:
            error_obj["exit_code"] = exit_code
        if hint:
            error_obj["hint"] = hint
        print(json.dumps(error_obj), file=sys.stderr)
    else:
        from rich.console import Console
        from rich.markup import escape

        console = Console(stderr=True)
        console.print(f"[red]{escape(message)}[/red]", highlight=False)
        if hint:
            console.print(f"[dim]{escape(hint)}[/dim]", highlight=False)
