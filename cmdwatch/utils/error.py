"""Error handling for the watch command."""

import logging
import sys
from functools import wraps

from cmdwatch.errors import ExecutionError, WatchError
from cmdwatch.utils.exit_codes import GENERAL_ERROR, exit_code_for_error
from cmdwatch.utils.output import emit_error

logger = logging.getLogger(__name__)


def handle_watch_error(func):
    """Decorator that turns fatal watch errors into messages and exit codes.

    Nothing is retried: every error ends the process after the terminal has
    already been restored by the session.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except WatchError as e:
            logger.error("Watch session failed: %s", e.message)
            child_code = e.exit_code if isinstance(e, ExecutionError) else None
            emit_error(e.code, e.message, e.hint, exit_code=child_code)
            sys.exit(exit_code_for_error(e))
        except Exception as e:
            logger.exception("Unexpected error")
            emit_error("UNEXPECTED_ERROR", f"Unexpected error: {e}")
            sys.exit(GENERAL_ERROR)

    return wrapper
