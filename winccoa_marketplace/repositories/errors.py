"""Classifies free-text git failures into semantic error kinds."""

from winccoa_marketplace.exceptions import (
    AuthenticationFailedError,
    DestinationConflictError,
    ErrorKind,
    MarketplaceError,
    MergeConflictError,
    RepositoryNotFoundError,
    SynchronizationFailedError,
)
from winccoa_marketplace.execution.results import CommandExecutionResult


class GitCommandError(Exception):
    """Raised by the git client when a git command does not succeed."""

    def __init__(self, message: str, result: CommandExecutionResult | None = None) -> None:
        """Initialize the error with its message and the failed command's result, if any."""
        details = result.failure_text if result else ""
        super().__init__(f"{message}: {details}" if details else message)
        self.result = result


FAILURE_PATTERNS: tuple[tuple[str, ErrorKind], ...] = (
    ("permission denied (publickey)", ErrorKind.AUTHENTICATION_FAILED),
    ("repository not found", ErrorKind.NOT_FOUND),
    ("could not read from remote repository", ErrorKind.NOT_FOUND),
    ("not found", ErrorKind.NOT_FOUND),
    ("does not exist", ErrorKind.NOT_FOUND),
    ("already exists", ErrorKind.CONFLICT),
    ("destination path", ErrorKind.CONFLICT),
    ("not a git repository", ErrorKind.CONFLICT),
    ("permission denied", ErrorKind.AUTHENTICATION_FAILED),
    ("authentication", ErrorKind.AUTHENTICATION_FAILED),
    ("could not read username", ErrorKind.AUTHENTICATION_FAILED),
    ("merge conflict", ErrorKind.MERGE_CONFLICT),
    ("not possible to fast-forward", ErrorKind.MERGE_CONFLICT),
    ("diverging branches", ErrorKind.MERGE_CONFLICT),
)
"""Ordered substring table; the first pattern found in a failure message selects its kind."""


def classify_failure_message(message: str) -> ErrorKind:
    """Select the semantic kind of a failure message.

    Matching is case-insensitive and follows the order of FAILURE_PATTERNS.
    Text matching no pattern is UNCLASSIFIED; a more specific kind is never guessed.
    """
    lowered = message.lower()
    for pattern, kind in FAILURE_PATTERNS:
        if pattern in lowered:
            return kind
    return ErrorKind.UNCLASSIFIED


def translate_clone_failure(exc: Exception, url: str, destination: str) -> MarketplaceError:
    """Translate a failure of a clone-or-synchronize call into a user-actionable error."""
    detail = str(exc)
    kind = classify_failure_message(detail)
    if kind == ErrorKind.NOT_FOUND:
        return RepositoryNotFoundError(
            f"Repository not found at URL: {url}. Please check the URL and your access permissions.",
            url=url,
            path=destination,
            detail=detail,
        )
    if kind == ErrorKind.CONFLICT:
        return DestinationConflictError(
            f"Directory '{destination}' already exists and cannot hold the repository from {url}",
            url=url,
            path=destination,
            detail=detail,
        )
    if kind == ErrorKind.AUTHENTICATION_FAILED:
        return AuthenticationFailedError(
            f"Authentication failed. Please check your credentials for URL: {url}",
            url=url,
            path=destination,
            detail=detail,
        )
    if kind == ErrorKind.MERGE_CONFLICT:
        return MergeConflictError(
            f"Repository at {destination} cannot be fast-forwarded to {url}. Please resolve conflicts manually.",
            url=url,
            path=destination,
            detail=detail,
        )
    return SynchronizationFailedError(f"Failed to synchronize repository from URL {url}: {detail}", url=url, path=destination, detail=detail)


def translate_pull_failure(exc: Exception, path: str) -> MarketplaceError:
    """Translate a failure of a pull on an existing working copy into a user-actionable error."""
    detail = str(exc)
    kind = classify_failure_message(detail)
    if kind == ErrorKind.NOT_FOUND:
        return RepositoryNotFoundError(f"Repository directory does not exist: {path}", path=path, detail=detail)
    if kind == ErrorKind.CONFLICT:
        return DestinationConflictError(f"Directory is not a git repository: {path}", path=path, detail=detail)
    if kind == ErrorKind.AUTHENTICATION_FAILED:
        return AuthenticationFailedError(f"Authentication failed for repository at: {path}", path=path, detail=detail)
    if kind == ErrorKind.MERGE_CONFLICT:
        return MergeConflictError(
            f"Merge conflicts detected in repository at: {path}. Please resolve conflicts manually.",
            path=path,
            detail=detail,
        )
    return SynchronizationFailedError(f"Failed to pull repository at {path}: {detail}", path=path, detail=detail)
