"""Unit tests for the RepositorySynchronizer class."""

import json
import shutil
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from winccoa_marketplace.exceptions import (
    AuthenticationFailedError,
    DestinationConflictError,
    InvalidInputError,
    MergeConflictError,
    RepositoryNotFoundError,
    SynchronizationFailedError,
)
from winccoa_marketplace.execution.results import CommandExecutionResult
from winccoa_marketplace.repositories.errors import GitCommandError
from winccoa_marketplace.repositories.git import GitClient
from winccoa_marketplace.repositories.models import PullSummary, RepositoryReference
from winccoa_marketplace.repositories.paths import PathResolver
from winccoa_marketplace.repositories.synchronize import RepositorySynchronizer, read_addon_manifest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

URL = "https://github.com/winccoa/dashboard.git"


def _fake_git() -> MagicMock:
    git = MagicMock(spec=GitClient)
    git.clone = AsyncMock()
    git.pull = AsyncMock(return_value=PullSummary())
    return git


def _git_failure(stderr: str) -> GitCommandError:
    result = CommandExecutionResult(command="git clone", working_directory=".", exit_code=128, stderr=stderr)
    return GitCommandError("git clone failed with exit code 128", result)


def test_repository_reference_rejects_empty_url() -> None:
    """Test that an empty URL is rejected before any I/O."""
    with pytest.raises(InvalidInputError):
        RepositoryReference(url="  ")


@pytest.mark.asyncio
async def test_sync_clones_missing_repository_into_parent(tmp_path: Path) -> None:
    """Test that a missing target is cloned, its parent created, and then pulled."""
    git = _fake_git()
    base = tmp_path / "projects" / "nested"
    synchronizer = RepositorySynchronizer(PathResolver(base), git)

    result = await synchronizer.sync_repository(RepositoryReference(url=URL, branch="develop"))

    assert base.is_dir()
    git.clone.assert_awaited_once_with(URL, "dashboard", cwd=base, branch="develop")
    git.pull.assert_awaited_once_with(base / "dashboard")
    assert result.path == base / "dashboard"
    assert result.cloned is True
    assert result.changed is True
    assert result.manifest_content is None


@pytest.mark.asyncio
async def test_sync_existing_repository_only_pulls(tmp_path: Path) -> None:
    """Test that an existing working copy is pulled, the branch ignored, and changes reported."""
    (tmp_path / "dashboard" / ".git").mkdir(parents=True)
    git = _fake_git()
    git.pull.return_value = PullSummary(changes=2, insertions=5, deletions=1, files=["a.ctl", "b.pnl"])
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), git)

    result = await synchronizer.sync_repository(RepositoryReference(url=URL, branch="ignored"))

    git.clone.assert_not_awaited()
    assert result.cloned is False
    assert result.changed is True
    assert result.insertions == 5
    assert result.deletions == 1
    assert result.files_touched == ["a.ctl", "b.pnl"]


@pytest.mark.asyncio
async def test_sync_unchanged_repository_reports_no_change(tmp_path: Path) -> None:
    """Test that a pull without changes yields changed=False."""
    (tmp_path / "dashboard" / ".git").mkdir(parents=True)
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), _fake_git())

    result = await synchronizer.sync_repository(RepositoryReference(url=URL))

    assert result.changed is False
    assert result.files_touched == []


@pytest.mark.asyncio
async def test_sync_returns_canonical_manifest(tmp_path: Path) -> None:
    """Test that the add-on manifest is re-serialized with two-space indentation."""
    repository = tmp_path / "dashboard"
    (repository / ".git").mkdir(parents=True)
    (repository / "package.winccoa.json").write_text('{"RepoName":"dashboard","Managers":[{"Name":"WCCOActrl"}]}')
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), _fake_git())

    result = await synchronizer.sync_repository(RepositoryReference(url=URL))

    assert result.manifest_content == json.dumps({"RepoName": "dashboard", "Managers": [{"Name": "WCCOActrl"}]}, indent=2)


def test_read_addon_manifest_ignores_malformed_json(tmp_path: Path) -> None:
    """Test that a malformed manifest produces None instead of failing."""
    (tmp_path / "package.winccoa.json").write_text("{not json")
    assert read_addon_manifest(tmp_path) is None


@pytest.mark.parametrize(
    "stderr, expected_type",
    [
        pytest.param("remote: Repository not found.", RepositoryNotFoundError, id="not_found"),
        pytest.param("fatal: Authentication failed for 'https://github.com/'", AuthenticationFailedError, id="authentication"),
        pytest.param(
            "git@github.com: Permission denied (publickey).\nfatal: Could not read from remote repository.",
            AuthenticationFailedError,
            id="ssh_publickey",
        ),
        pytest.param("fatal: the remote end hung up unexpectedly", SynchronizationFailedError, id="unclassified"),
    ],
)
@pytest.mark.asyncio
async def test_sync_translates_clone_failures(tmp_path: Path, stderr: str, expected_type: type) -> None:
    """Test that clone failures surface as typed errors chained to the git failure."""
    git = _fake_git()
    cause = _git_failure(stderr)
    git.clone.side_effect = cause
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), git)

    with pytest.raises(expected_type) as exc_info:
        await synchronizer.sync_repository(RepositoryReference(url=URL))

    assert exc_info.value.__cause__ is cause
    assert exc_info.value.context["url"] == URL


@pytest.mark.asyncio
async def test_sync_into_existing_plain_file_is_a_conflict(tmp_path: Path) -> None:
    """Test that a target path occupied by a file surfaces as a destination conflict."""
    occupied = tmp_path / "occupied"
    occupied.write_text("")
    git = GitClient(AsyncMock())
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), git)

    with pytest.raises(DestinationConflictError):
        await synchronizer.sync_repository(RepositoryReference(url=URL, target_directory=str(occupied)))


@pytest.mark.asyncio
async def test_pull_repository_rejects_empty_path() -> None:
    """Test that an empty path is rejected."""
    synchronizer = RepositorySynchronizer(PathResolver("."), _fake_git())
    with pytest.raises(InvalidInputError):
        await synchronizer.pull_repository("")


@pytest.mark.asyncio
async def test_pull_repository_missing_directory(tmp_path: Path) -> None:
    """Test that pulling a non-existent directory reports the repository as not found."""
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), GitClient(AsyncMock()))
    with pytest.raises(RepositoryNotFoundError):
        await synchronizer.pull_repository(tmp_path / "missing")


@pytest.mark.asyncio
async def test_pull_repository_merge_conflict(tmp_path: Path) -> None:
    """Test that a non fast-forwardable pull is reported as a merge conflict."""
    git = _fake_git()
    git.pull.side_effect = GitCommandError(
        "git pull failed with exit code 128",
        CommandExecutionResult(command="git pull", working_directory=str(tmp_path), exit_code=128, stderr="fatal: Not possible to fast-forward"),
    )
    synchronizer = RepositorySynchronizer(PathResolver(tmp_path), git)

    with pytest.raises(MergeConflictError):
        await synchronizer.pull_repository(tmp_path)


@requires_git
@pytest.mark.asyncio
async def test_sync_is_idempotent_against_real_repository(
    tmp_path: Path, origin_repository: Path, push_to_origin: Callable[[str, str], None]
) -> None:
    """Test clone then repeated sync: the second call changes nothing, a new upstream commit is picked up."""
    base = tmp_path / "projects"
    synchronizer = RepositorySynchronizer(PathResolver(base), GitClient())
    reference = RepositoryReference(url=str(origin_repository))

    first = await synchronizer.sync_repository(reference)
    second = await synchronizer.sync_repository(reference)

    assert first.path == base / "origin"
    assert first.cloned is True and first.changed is True
    assert json.loads(first.manifest_content or "{}") == {"RepoName": "addon", "Version": "1.0.0"}
    assert second.path == first.path
    assert second.cloned is False and second.changed is False

    push_to_origin("panel.pnl", "new panel\n")
    third = await synchronizer.sync_repository(reference)

    assert third.changed is True
    assert third.files_touched == ["panel.pnl"]
