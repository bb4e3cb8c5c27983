"""Contains results of external command execution."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandExecutionResult:
    """Contains the outcome of a single external process invocation."""

    command: str
    working_directory: str
    exit_code: int
    message: str = ""
    stdout: str = ""
    stderr: str = ""

    @property
    def failure_text(self) -> str:
        """Output of the command used for failure classification, falling back to the message."""
        output = "\n".join(part.strip() for part in (self.stderr, self.stdout) if part.strip())
        return output or self.message

    def format_details(self) -> str:
        """Format the result as a multi-line block for operator-facing logs."""
        return (
            f"Command:           {self.command}\n"
            f"Exit Code:         {self.exit_code}\n"
            f"Working Directory: {self.working_directory}\n"
            f"Message:           {self.message or 'None'}\n"
            f"Stderr:            {self.stderr or 'None'}\n"
            f"Stdout:            {self.stdout or 'None'}"
        )
