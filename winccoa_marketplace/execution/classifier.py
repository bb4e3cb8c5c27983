"""Classifies process exit codes into success, warning and error tiers."""

from collections.abc import Collection
from enum import Enum

DEFAULT_SUCCESS_EXIT_CODES: frozenset[int] = frozenset({0})
"""Exit codes treated as success when a caller supplies none."""

DEFAULT_WARNING_EXIT_CODES: frozenset[int] = frozenset()
"""Exit codes treated as warnings when a caller supplies none."""


class ExitClassification(str, Enum):
    """Tier of a process exit code."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def classify_exit_code(
    exit_code: int,
    success_codes: Collection[int] = DEFAULT_SUCCESS_EXIT_CODES,
    warning_codes: Collection[int] = DEFAULT_WARNING_EXIT_CODES,
) -> ExitClassification:
    """Map an exit code to exactly one tier.

    Success codes are checked before warning codes. Any code found in neither
    collection is an error: an unknown exit code is never treated as success.
    """
    if exit_code in success_codes:
        return ExitClassification.SUCCESS
    if exit_code in warning_codes:
        return ExitClassification.WARNING
    return ExitClassification.ERROR
