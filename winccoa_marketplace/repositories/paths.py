"""Resolves where a remote repository lives on local disk."""

import os
import re
import time
from pathlib import Path

import structlog

from winccoa_marketplace.repositories.models import ResolvedTarget
from winccoa_marketplace.utils.constants import FALLBACK_REPOSITORY_NAME_PREFIX, GIT_METADATA_DIRECTORY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

REPOSITORY_NAME_PATTERN = re.compile(r"[/:\\]?([^/:\\]+?)(?:\.git)?[/\\]*$")
"""Last path segment of an HTTPS, SSH or local URL, without a trailing .git suffix."""


def extract_repo_name(url: str) -> str:
    """Extract the repository name from a clone URL.

    Handles HTTPS (https://github.com/owner/repo.git), SCP-style SSH
    (git@github.com:owner/repo.git) and local paths. Never raises: when no
    name can be extracted a time-based unique name is returned instead, so
    that a bad URL is reported by the clone step rather than here.
    """
    match = REPOSITORY_NAME_PATTERN.search(url.strip())
    if match and match.group(1) and match.group(1) not in (".", ".."):
        return match.group(1)
    fallback = f"{FALLBACK_REPOSITORY_NAME_PREFIX}{int(time.time() * 1000)}"
    logger.warning("Could not extract repository name from URL, using fallback", url=url, fallback=fallback)
    return fallback


def is_git_repository(path: Path) -> bool:
    """Check whether a directory holds a version-control metadata marker."""
    return (path / GIT_METADATA_DIRECTORY).exists()


class PathResolver:
    """Resolves the local target of a repository from its URL and an optional directory hint."""

    def __init__(self, default_base_directory: Path | str) -> None:
        """Initialize the resolver with the directory used when no hint is given."""
        self.default_base_directory = Path(os.path.abspath(default_base_directory))

    def resolve(self, url: str, target_directory: str | Path | None = None) -> ResolvedTarget:
        """Resolve the on-disk target for a repository.

        Args:
            url: Clone URL of the repository
            target_directory: Optional hint, absolute or relative to the current directory

        Returns:
            ResolvedTarget with an absolute, normalized full path
        """
        if not target_directory:
            repo_name = extract_repo_name(url)
            full_path = self.default_base_directory / repo_name
        else:
            hint = Path(os.path.abspath(target_directory))
            if hint.is_dir():
                if is_git_repository(hint):
                    full_path = hint
                    repo_name = hint.name
                else:
                    # Plain directory: treat it as a container for the repository.
                    repo_name = extract_repo_name(url)
                    full_path = hint / repo_name
            else:
                full_path = hint
                repo_name = hint.name

        target = ResolvedTarget(
            full_path=full_path,
            repo_name=repo_name,
            already_exists=full_path.exists(),
            is_existing_repository=full_path.is_dir() and is_git_repository(full_path),
        )
        logger.debug(
            "Resolved repository target",
            url=url,
            target_directory=str(target_directory) if target_directory else None,
            full_path=str(target.full_path),
            repo_name=target.repo_name,
            already_exists=target.already_exists,
            is_existing_repository=target.is_existing_repository,
        )
        return target
