"""Centralized exception hierarchy for the marketplace core.

Every error raised to a caller carries a semantic kind and enough context
(URL, path, command, exit code, stderr) to diagnose the failure without
re-running anything.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Semantic classification of a failure, independent of its source."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTHENTICATION_FAILED = "authentication_failed"
    MERGE_CONFLICT = "merge_conflict"
    ACCESS_DENIED = "access_denied"
    UNCLASSIFIED = "unclassified"


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    kind: ErrorKind = ErrorKind.UNCLASSIFIED

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize the error with a user-facing message and diagnostic context."""
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return the message followed by its diagnostic detail, if any."""
        detail = self.context.get("detail")
        if detail and detail not in self.message:
            return f"{self.message} ({detail})"
        return self.message


class InvalidInputError(MarketplaceError):
    """Raised when a required input is empty or missing, before any I/O."""

    kind = ErrorKind.INVALID_INPUT


class RepositoryNotFoundError(MarketplaceError):
    """Raised when the remote rejects a repository URL or a local repository is missing."""

    kind = ErrorKind.NOT_FOUND


class DestinationConflictError(MarketplaceError):
    """Raised when a local destination exists but cannot hold the repository."""

    kind = ErrorKind.CONFLICT


class AuthenticationFailedError(MarketplaceError):
    """Raised when the remote refuses the supplied credentials."""

    kind = ErrorKind.AUTHENTICATION_FAILED


class MergeConflictError(MarketplaceError):
    """Raised when a working copy cannot be fast-forwarded to its remote branch."""

    kind = ErrorKind.MERGE_CONFLICT


class SynchronizationFailedError(MarketplaceError):
    """Raised for synchronization failures that match no known pattern."""

    kind = ErrorKind.UNCLASSIFIED


class OrganizationNotFoundError(MarketplaceError):
    """Raised when the remote reports that an organization does not exist."""

    kind = ErrorKind.NOT_FOUND


class AccessDeniedError(MarketplaceError):
    """Raised when the remote forbids access to an organization."""

    kind = ErrorKind.ACCESS_DENIED


class ListingFailedError(MarketplaceError):
    """Raised for repository listing failures that match no known status."""

    kind = ErrorKind.UNCLASSIFIED


class InstallationFailedError(MarketplaceError):
    """Raised when the dependency install/build step of a sub-project fails."""

    kind = ErrorKind.UNCLASSIFIED


class RegistrationFailedError(MarketplaceError):
    """Raised when the project administration refuses to register a sub-project."""

    kind = ErrorKind.UNCLASSIFIED
