"""Tests for the watch error handling decorator."""

from unittest.mock import patch

import pytest

from cmdwatch.errors import ExecutionError, SpawnError, TerminalError
from cmdwatch.utils.error import handle_watch_error
from cmdwatch.utils.exit_codes import COMMAND_FAILED, GENERAL_ERROR, SPAWN_ERROR, TERMINAL_ERROR


class TestHandleWatchError:
    """Test suite for handle_watch_error decorator."""

    @pytest.fixture
    def mock_emit_error(self):
        with patch("cmdwatch.utils.error.emit_error") as mock:
            yield mock

    def test_successful_call_no_error(self, mock_emit_error):
        @handle_watch_error
        def successful_func(a, b=None):
            return f"{a}-{b}"

        assert successful_func("x", b="y") == "x-y"
        mock_emit_error.assert_not_called()

    def test_execution_error_exits_with_command_failed(self, mock_emit_error):
        @handle_watch_error
        def failing_func():
            raise ExecutionError(2)

        with pytest.raises(SystemExit) as exc_info:
            failing_func()

        assert exc_info.value.code == COMMAND_FAILED
        mock_emit_error.assert_called_once_with(
            "COMMAND_FAILED", "Command failed with exit code: 2", "", exit_code=2
        )

    def test_terminal_error_includes_hint(self, mock_emit_error):
        @handle_watch_error
        def failing_func():
            raise TerminalError("Output is not a terminal")

        with pytest.raises(SystemExit) as exc_info:
            failing_func()

        assert exc_info.value.code == TERMINAL_ERROR
        code, message, hint = mock_emit_error.call_args[0]
        assert code == "TERMINAL_ERROR"
        assert "interactive terminal" in hint

    def test_spawn_error(self, mock_emit_error):
        @handle_watch_error
        def failing_func():
            raise SpawnError("sh", "No such file or directory")

        with pytest.raises(SystemExit) as exc_info:
            failing_func()

        assert exc_info.value.code == SPAWN_ERROR
        assert mock_emit_error.call_args[1]["exit_code"] is None

    def test_unexpected_error(self, mock_emit_error):
        @handle_watch_error
        def failing_func():
            raise RuntimeError("boom")

        with pytest.raises(SystemExit) as exc_info:
            failing_func()

        assert exc_info.value.code == GENERAL_ERROR
        assert "boom" in mock_emit_error.call_args[0][1]

    def test_system_exit_passes_through(self, mock_emit_error):
        @handle_watch_error
        def terminated():
            raise SystemExit(143)

        with pytest.raises(SystemExit) as exc_info:
            terminated()

        assert exc_info.value.code == 143
        mock_emit_error.assert_not_called()
