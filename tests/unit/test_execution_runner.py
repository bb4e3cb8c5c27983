"""Unit tests for the CommandRunner class."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from winccoa_marketplace.execution.results import CommandExecutionResult
from winccoa_marketplace.execution.runner import COMMAND_NOT_FOUND_EXIT_CODE, TIMED_OUT_EXIT_CODE, CommandRunner


@pytest.mark.asyncio
async def test_execute_captures_output_and_exit_code(tmp_path: Path) -> None:
    """Test that stdout, stderr, exit code and working directory are captured."""
    runner = CommandRunner()
    script = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"

    result = await runner.execute(sys.executable, "-c", script, cwd=tmp_path)

    assert result.exit_code == 3
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"
    assert result.working_directory == str(tmp_path)
    assert result.message.startswith("Command failed:")
    assert sys.executable in result.command


@pytest.mark.asyncio
async def test_execute_success_has_no_message() -> None:
    """Test that a successful command produces an empty message."""
    result = await CommandRunner().execute(sys.executable, "-c", "pass")
    assert result.exit_code == 0
    assert result.message == ""


@pytest.mark.asyncio
async def test_execute_missing_executable_returns_result() -> None:
    """Test that an executable that cannot start yields a result instead of raising."""
    result = await CommandRunner().execute("definitely-not-an-executable-6c1f2a")
    assert result.exit_code == COMMAND_NOT_FOUND_EXIT_CODE
    assert "Command failed to start" in result.message
    assert result.failure_text == result.message


@pytest.mark.asyncio
async def test_execute_timeout_kills_process() -> None:
    """Test that a command exceeding its timeout is killed and reported as failed."""
    result = await CommandRunner().execute(sys.executable, "-c", "import time; time.sleep(30)", timeout=0.5)
    assert result.exit_code != 0
    assert "timed out" in result.message


def test_format_details_uses_none_for_empty_fields() -> None:
    """Test the operator-facing detail block."""
    result = CommandExecutionResult(command="ascii -in x", working_directory="/proj", exit_code=1, stderr="boom")
    details = result.format_details()
    assert "Command:           ascii -in x" in details
    assert "Exit Code:         1" in details
    assert "Message:           None" in details
    assert "Stderr:            boom" in details
    assert "Stdout:            None" in details


def test_failure_text_prefers_output_over_message() -> None:
    """Test that failure text joins stderr and stdout before falling back to the message."""
    result = CommandExecutionResult(command="git", working_directory=".", exit_code=1, message="failed", stdout="out\n", stderr="err\n")
    assert result.failure_text == "err\nout"


@pytest.mark.asyncio
async def test_execute_without_return_code_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a process finishing without a return code is reported as a failure instead of raising."""
    process = SimpleNamespace(communicate=AsyncMock(return_value=(b"", b"lost")), returncode=None)
    monkeypatch.setattr("winccoa_marketplace.execution.runner.asyncio.create_subprocess_exec", AsyncMock(return_value=process))

    result = await CommandRunner().execute("git", "pull")

    assert result.exit_code == TIMED_OUT_EXIT_CODE
    assert result.stderr == "lost"
    assert result.message == "Command failed: git pull"
