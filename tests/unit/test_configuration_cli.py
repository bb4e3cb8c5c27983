"""Unit tests for the Typer command line interface."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from typer.testing import CliRunner

from winccoa_marketplace.configuration import cli
from winccoa_marketplace.exceptions import MergeConflictError

runner = CliRunner()


@pytest.fixture
def service(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Replace the service factory used by the commands."""
    service = MagicMock()
    monkeypatch.setattr(cli.MarketplaceService, "create", AsyncMock(return_value=service))
    return service


def test_clone_prints_path_and_manifest(service: MagicMock, tmp_path: Path) -> None:
    """Test the clone command output."""
    service.clone = AsyncMock(return_value={"repositoryPath": str(tmp_path / "dashboard"), "manifestContent": '{\n  "Version": "1.0.0"\n}'})

    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "clone", "https://github.com/winccoa/dashboard.git"])

    assert result.exit_code == 0, result.output
    assert f"Repository available at {tmp_path / 'dashboard'}" in result.output
    assert '"Version": "1.0.0"' in result.output
    service.clone.assert_awaited_once_with("https://github.com/winccoa/dashboard.git", target_directory=None, branch=None)


def test_pull_reports_typed_errors(service: MagicMock, tmp_path: Path) -> None:
    """Test that marketplace errors become a non-zero exit with their kind."""
    service.pull = AsyncMock(side_effect=MergeConflictError("Merge conflicts detected in repository at: /x"))

    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "pull", "dashboard"])

    assert result.exit_code == 1
    assert "merge_conflict" in result.output


def test_pull_reports_changes(service: MagicMock, tmp_path: Path) -> None:
    """Test the pull command output."""
    service.pull = AsyncMock(return_value=2)
    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "pull", "dashboard"])
    assert result.exit_code == 0, result.output
    assert "Updated 2 file(s)" in result.output


def test_list_repos_pages_through_adapter(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test the list-repos command against a stubbed metadata adapter."""
    adapter = MagicMock()
    adapter.is_authenticated = False
    adapter.list_organization_repositories_page = AsyncMock(
        return_value=[SimpleNamespace(name="dashboard", full_name="winccoa/dashboard", description="HMI", stargazers_count=7)]
    )
    monkeypatch.setattr(cli.GitHubKitAdapter, "create", AsyncMock(return_value=adapter))

    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "list-repos", "winccoa"])

    assert result.exit_code == 0, result.output
    assert "winccoa/dashboard (7 stars) - HMI" in result.output
    assert adapter.list_organization_repositories_page.await_args.kwargs["visibility"] == "public"


def test_list_repos_rejects_unknown_visibility(tmp_path: Path) -> None:
    """Test validation of the visibility option."""
    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "list-repos", "--visibility", "secret"])
    assert result.exit_code == 2


def test_install_missing_directory(tmp_path: Path) -> None:
    """Test that installing into a missing directory fails."""
    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "install", str(tmp_path / "missing")])
    assert result.exit_code == 1


def test_install_without_packages(tmp_path: Path) -> None:
    """Test that a sub-project without JavaScript packages installs nothing."""
    result = runner.invoke(cli.typer_app, ["--project-dir", str(tmp_path), "install", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "No JavaScript packages found" in result.output
