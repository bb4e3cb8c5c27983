"""Version-control client that drives the git executable."""

import os
from pathlib import Path

import structlog

from winccoa_marketplace.execution.classifier import ExitClassification, classify_exit_code
from winccoa_marketplace.execution.results import CommandExecutionResult
from winccoa_marketplace.execution.runner import CommandRunner
from winccoa_marketplace.repositories.errors import GitCommandError
from winccoa_marketplace.repositories.models import PullSummary
from winccoa_marketplace.repositories.paths import is_git_repository

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
"""Object id of git's empty tree, the diff base of a repository that had no commit yet."""


def parse_numstat(output: str) -> PullSummary:
    """Build change statistics from `git diff --numstat` output.

    Binary files report "-" for both counts; they count as touched files
    without insertions or deletions.
    """
    insertions = 0
    deletions = 0
    files: list[str] = []
    for line in output.splitlines():
        parts = line.split("\t", 2)
        if len(parts) != 3:
            continue
        added, removed, file_name = parts
        if added.isdigit():
            insertions += int(added)
        if removed.isdigit():
            deletions += int(removed)
        files.append(file_name)
    return PullSummary(changes=len(files), insertions=insertions, deletions=deletions, files=files)


class GitClient:
    """Clones repositories and fast-forwards working copies via the git command line."""

    def __init__(self, runner: CommandRunner | None = None, git_executable: str = "git") -> None:
        """Initialize the client with the runner used for every git invocation."""
        self.runner = runner or CommandRunner()
        self.git_executable = git_executable
        # Never block on a credential prompt; a missing credential must fail the command.
        self._env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    async def _run(self, *args: str, cwd: Path) -> CommandExecutionResult:
        return await self.runner.execute(self.git_executable, *args, cwd=cwd, env=self._env)

    async def _run_checked(self, *args: str, cwd: Path) -> CommandExecutionResult:
        result = await self._run(*args, cwd=cwd)
        if classify_exit_code(result.exit_code) != ExitClassification.SUCCESS:
            logger.error("Git command failed", details=result.format_details())
            raise GitCommandError(f"git {args[0]} failed with exit code {result.exit_code}", result)
        return result

    async def clone(self, url: str, destination_name: str, cwd: Path, branch: str | None = None) -> CommandExecutionResult:
        """Clone a repository into a directory named destination_name below cwd.

        Args:
            url: Clone URL (HTTPS, SSH or local path)
            destination_name: Name of the directory created for the working copy
            cwd: Parent directory of the new working copy
            branch: Optional branch to check out instead of the remote default

        Raises:
            GitCommandError: If git reports a failure
        """
        args = ["clone"]
        if branch:
            args += ["--branch", branch]
        args += [url, destination_name]
        logger.info("Cloning repository", url=url, destination=str(cwd / destination_name), branch=branch)
        return await self._run_checked(*args, cwd=cwd)

    async def head(self, path: Path) -> str | None:
        """Return the commit id of HEAD, or None for a repository without commits."""
        result = await self._run("rev-parse", "--verify", "--quiet", "HEAD", cwd=path)
        if result.exit_code != 0:
            return None
        return result.stdout.strip() or None

    async def pull(self, path: Path) -> PullSummary:
        """Fetch the upstream branch and fast-forward the working copy to its tip.

        Args:
            path: Root of an existing working copy

        Returns:
            PullSummary describing the files changed by the fast-forward

        Raises:
            GitCommandError: If the path is not a working copy or git reports a failure
        """
        if not path.exists():
            raise GitCommandError(f"Repository directory does not exist: {path}")
        if not is_git_repository(path):
            raise GitCommandError(f"Directory is not a git repository: {path}")

        before = await self.head(path)
        logger.info("Pulling latest changes", path=str(path))
        await self._run_checked("pull", "--ff-only", cwd=path)
        after = await self.head(path)

        if after is None or before == after:
            logger.info("Repository is already up to date", path=str(path))
            return PullSummary()

        diff = await self._run_checked("diff", "--numstat", before or EMPTY_TREE_SHA, after, cwd=path)
        summary = parse_numstat(diff.stdout)
        logger.info(
            "Pull completed",
            path=str(path),
            changes=summary.changes,
            insertions=summary.insertions,
            deletions=summary.deletions,
        )
        return summary
