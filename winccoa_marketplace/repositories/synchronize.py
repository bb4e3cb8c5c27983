"""Idempotent clone-or-synchronize of add-on repositories."""

import json
from pathlib import Path

import structlog
from structlog.contextvars import bound_contextvars

from winccoa_marketplace.exceptions import InvalidInputError, MarketplaceError
from winccoa_marketplace.repositories.errors import GitCommandError, translate_clone_failure, translate_pull_failure
from winccoa_marketplace.repositories.git import GitClient
from winccoa_marketplace.repositories.models import PullSummary, RepositoryReference, SyncResult
from winccoa_marketplace.repositories.paths import PathResolver
from winccoa_marketplace.utils.constants import ADDON_MANIFEST_FILENAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def read_addon_manifest(repository_path: Path) -> str | None:
    """Read the add-on manifest at a repository root and re-serialize it canonically.

    Returns None when the manifest is absent or cannot be parsed; a malformed
    manifest never fails the synchronization that probes it.
    """
    manifest_path = repository_path / ADDON_MANIFEST_FILENAME
    if not manifest_path.is_file():
        logger.info("Add-on manifest not found, repository may not be a WinCC OA add-on", path=str(repository_path))
        return None
    try:
        content = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Failed to read or parse add-on manifest", manifest=str(manifest_path), error=str(e))
        return None
    logger.info("Add-on manifest found", manifest=str(manifest_path))
    return json.dumps(content, indent=2)


class RepositorySynchronizer:
    """Produces a local, up-to-date working copy of a remote repository."""

    def __init__(self, resolver: PathResolver, git: GitClient) -> None:
        """Initialize the synchronizer with its path resolver and version-control client."""
        self.resolver = resolver
        self.git = git

    async def sync_repository(self, reference: RepositoryReference) -> SyncResult:
        """Clone the repository if it is missing locally, otherwise fast-forward it.

        Calling this twice with the same reference is safe: the second call is
        a no-op update reporting no changes.

        Raises:
            RepositoryNotFoundError: The remote rejects the URL or access
            DestinationConflictError: The local path exists and cannot hold the repository
            AuthenticationFailedError: The remote refuses the credentials
            MergeConflictError: The working copy cannot be fast-forwarded
            SynchronizationFailedError: Any other failure
        """
        target = self.resolver.resolve(reference.url, reference.target_directory)
        destination = str(target.full_path)

        with bound_contextvars(url=reference.url, path=destination):
            cloned = False
            try:
                if target.already_exists:
                    logger.info("Repository already exists, synchronizing with remote", branch_ignored=reference.branch)
                    summary = await self.git.pull(target.full_path)
                else:
                    parent = target.full_path.parent
                    if not parent.exists():
                        parent.mkdir(parents=True, exist_ok=True)
                        logger.info("Created parent directory", parent=str(parent))
                    await self.git.clone(reference.url, target.repo_name, cwd=parent, branch=reference.branch)
                    cloned = True
                    logger.info("Cloned repository, pulling to reach the branch tip")
                    # A clone may land behind the branch tip under concurrent pushes.
                    summary = await self.git.pull(target.full_path)
            except (GitCommandError, OSError) as e:
                error = translate_clone_failure(e, reference.url, destination)
                logger.error("Repository synchronization failed", error_kind=error.kind.value, error=str(error))
                raise error from e

            manifest_content = read_addon_manifest(target.full_path)
            result = SyncResult(
                path=target.full_path,
                changed=cloned or summary.changes > 0,
                cloned=cloned,
                insertions=summary.insertions,
                deletions=summary.deletions,
                files_touched=list(summary.files),
                manifest_content=manifest_content,
            )
            logger.info(
                "Repository synchronized",
                changed=result.changed,
                cloned=result.cloned,
                insertions=result.insertions,
                deletions=result.deletions,
            )
            return result

    async def pull_repository(self, path: str | Path) -> PullSummary:
        """Fast-forward an existing working copy given its directory.

        Raises:
            InvalidInputError: The path is empty
            RepositoryNotFoundError: The directory does not exist
            DestinationConflictError: The directory is not a working copy
            AuthenticationFailedError: The remote refuses the credentials
            MergeConflictError: The working copy cannot be fast-forwarded
            SynchronizationFailedError: Any other failure
        """
        if not path or not str(path).strip():
            raise InvalidInputError("Repository directory must not be empty")
        repository_path = Path(path).absolute()
        try:
            return await self.git.pull(repository_path)
        except (GitCommandError, OSError) as e:
            error: MarketplaceError = translate_pull_failure(e, str(repository_path))
            logger.error("Failed to pull repository", path=str(repository_path), error_kind=error.kind.value, error=str(error))
            raise error from e
