"""Runs external processes to completion and captures their results."""

import asyncio
import os
import shlex
from pathlib import Path

import structlog

from winccoa_marketplace.execution.results import CommandExecutionResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

COMMAND_NOT_FOUND_EXIT_CODE = 127
"""Exit code reported when the executable could not be started at all."""

TIMED_OUT_EXIT_CODE = -1
"""Exit code reported when a finished or timed out process left no return code behind."""


class CommandRunner:
    """Executes external commands and returns a structured result for each one.

    The runner never raises for a failing command: a non-zero exit code, a
    missing executable or a timeout all produce a CommandExecutionResult that
    the caller classifies.
    """

    async def execute(
        self,
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandExecutionResult:
        """Execute a command and capture exit code, stdout and stderr.

        Args:
            *args: Command arguments, executable first
            cwd: Working directory, defaults to the current directory
            env: Environment variables for the child process
            timeout: Timeout in seconds, None waits indefinitely

        Returns:
            The captured CommandExecutionResult
        """
        command = shlex.join(args)
        working_directory = str(cwd) if cwd else os.getcwd()
        logger.debug("Executing command", command=command, working_directory=working_directory)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                env=env,
            )
        except OSError as e:
            logger.error("Command could not be started", command=command, working_directory=working_directory, error=str(e))
            return CommandExecutionResult(
                command=command,
                working_directory=working_directory,
                exit_code=COMMAND_NOT_FOUND_EXIT_CODE,
                message=f"Command failed to start: {e}",
            )

        try:
            if timeout:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
            else:
                stdout, stderr = await process.communicate()
        except asyncio.TimeoutError:
            logger.error("Command timed out", command=command, timeout=timeout)
            process.kill()
            await process.wait()
            return CommandExecutionResult(
                command=command,
                working_directory=working_directory,
                exit_code=process.returncode if process.returncode is not None else TIMED_OUT_EXIT_CODE,
                message=f"Command timed out after {timeout}s: {command}",
            )

        stdout_str = stdout.decode("utf-8", errors="replace") if stdout else ""
        stderr_str = stderr.decode("utf-8", errors="replace") if stderr else ""
        if stdout_str:
            logger.debug("Command stdout", command=command, stdout=stdout_str)
        if stderr_str:
            logger.debug("Command stderr", command=command, stderr=stderr_str)

        exit_code = process.returncode if process.returncode is not None else TIMED_OUT_EXIT_CODE
        message = f"Command failed: {command}" if exit_code != 0 else ""
        return CommandExecutionResult(
            command=command,
            working_directory=working_directory,
            exit_code=exit_code,
            message=message,
            stdout=stdout_str,
            stderr=stderr_str,
        )
