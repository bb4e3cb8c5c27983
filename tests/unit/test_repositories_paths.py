"""Unit tests for repository name extraction and target resolution."""

import os
from pathlib import Path

import pytest

from winccoa_marketplace.repositories.paths import PathResolver, extract_repo_name


@pytest.mark.parametrize(
    "url, expected",
    [
        pytest.param("https://github.com/winccoa/dashboard.git", "dashboard", id="https_with_suffix"),
        pytest.param("https://github.com/winccoa/dashboard", "dashboard", id="https_without_suffix"),
        pytest.param("https://github.com/winccoa/dashboard/", "dashboard", id="trailing_slash"),
        pytest.param("git@github.com:winccoa/dashboard.git", "dashboard", id="scp_style_ssh"),
        pytest.param("git@github.com:dashboard.git", "dashboard", id="scp_style_without_owner"),
        pytest.param("ssh://git@host:2222/team/addon.git", "addon", id="ssh_url_with_port"),
        pytest.param("/srv/git/local-addon.git", "local-addon", id="local_path"),
    ],
)
def test_extract_repo_name(url: str, expected: str) -> None:
    """Test that the last URL segment without .git is the repository name."""
    assert extract_repo_name(url) == expected


@pytest.mark.parametrize("url", ["", "   ", "/", "git@github.com:"])
def test_extract_repo_name_falls_back_to_unique_name(url: str) -> None:
    """Test that unusable URLs produce a time-based name instead of raising."""
    name = extract_repo_name(url)
    assert name.startswith("repo-")
    assert name[len("repo-") :].isdigit()


def test_resolve_without_hint_uses_default_base(tmp_path: Path) -> None:
    """Test resolution without a target directory."""
    target = PathResolver(tmp_path).resolve("https://github.com/winccoa/dashboard.git")

    assert target.full_path == tmp_path / "dashboard"
    assert target.repo_name == "dashboard"
    assert target.already_exists is False
    assert target.is_existing_repository is False


def test_resolve_hint_that_is_a_repository(tmp_path: Path) -> None:
    """Test that an existing working copy is used as the target itself."""
    repository = tmp_path / "my-checkout"
    (repository / ".git").mkdir(parents=True)

    target = PathResolver(tmp_path / "unused").resolve("https://github.com/winccoa/dashboard.git", str(repository))

    assert target.full_path == repository
    assert target.repo_name == "my-checkout"
    assert target.already_exists is True
    assert target.is_existing_repository is True


def test_resolve_hint_that_is_a_container(tmp_path: Path) -> None:
    """Test that a plain existing directory holds the repository in a child directory."""
    target = PathResolver(tmp_path / "unused").resolve("git@github.com:winccoa/dashboard.git", str(tmp_path))

    assert target.full_path == tmp_path / "dashboard"
    assert target.repo_name == "dashboard"
    assert target.already_exists is False


def test_resolve_container_with_existing_checkout(tmp_path: Path) -> None:
    """Test that a container already holding the repository reports it as existing."""
    (tmp_path / "dashboard" / ".git").mkdir(parents=True)

    target = PathResolver(tmp_path / "unused").resolve("https://github.com/winccoa/dashboard.git", str(tmp_path))

    assert target.full_path == tmp_path / "dashboard"
    assert target.already_exists is True
    assert target.is_existing_repository is True


def test_resolve_missing_hint_is_used_verbatim(tmp_path: Path) -> None:
    """Test that a non-existent hint becomes the working copy path with its own name."""
    hint = tmp_path / "addons" / "custom-name"

    target = PathResolver(tmp_path).resolve("https://github.com/winccoa/dashboard.git", str(hint))

    assert target.full_path == hint
    assert target.repo_name == "custom-name"
    assert target.already_exists is False


def test_resolve_relative_hint_against_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that relative hints are made absolute and normalized."""
    monkeypatch.chdir(tmp_path)

    target = PathResolver("/unused").resolve("https://github.com/winccoa/dashboard.git", "addons/../new-addon")

    assert target.full_path == Path(os.path.abspath(tmp_path / "new-addon"))
    assert target.full_path.is_absolute()
    assert target.repo_name == "new-addon"


def test_resolve_existing_file_hint_is_used_verbatim(tmp_path: Path) -> None:
    """Test that an existing non-directory hint is used as-is and reported as existing."""
    hint = tmp_path / "occupied"
    hint.write_text("not a directory")

    target = PathResolver(tmp_path).resolve("https://github.com/winccoa/dashboard.git", str(hint))

    assert target.full_path == hint
    assert target.already_exists is True
    assert target.is_existing_repository is False


def test_resolve_is_deterministic(tmp_path: Path) -> None:
    """Test that identical inputs and filesystem state give identical targets."""
    resolver = PathResolver(tmp_path)
    url = "https://github.com/winccoa/dashboard.git"
    assert resolver.resolve(url) == resolver.resolve(url)
    assert resolver.resolve(url, str(tmp_path)) == resolver.resolve(url, str(tmp_path))
