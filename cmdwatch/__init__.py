"""Re-run a shell command on an interval and show its output full-screen."""

import logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
