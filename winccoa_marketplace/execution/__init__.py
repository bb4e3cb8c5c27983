"""External command execution and exit-code classification."""

from .classifier import ExitClassification, classify_exit_code
from .results import CommandExecutionResult
from .runner import CommandRunner

__all__ = [
    "CommandExecutionResult",
    "CommandRunner",
    "ExitClassification",
    "classify_exit_code",
]
