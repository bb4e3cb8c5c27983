"""Fixtures for unit tests."""

import subprocess
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def _git(*args: str, cwd: Path) -> str:
    completed = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


@pytest.fixture
def origin_repository(tmp_path: Path) -> Path:
    """A bare repository with one commit on main, usable as a clone URL."""
    seed = tmp_path / "seed"
    seed.mkdir()
    _git("init", cwd=seed)
    _git("checkout", "-B", "main", cwd=seed)
    (seed / "README.md").write_text("first\n")
    (seed / "package.winccoa.json").write_text('{"RepoName": "addon", "Version": "1.0.0"}')
    _git("add", ".", cwd=seed)
    _git("commit", "-m", "initial", cwd=seed)
    origin = tmp_path / "origin.git"
    _git("clone", "--bare", str(seed), str(origin), cwd=tmp_path)
    _git("symbolic-ref", "HEAD", "refs/heads/main", cwd=origin)
    return origin


@pytest.fixture
def push_to_origin(origin_repository: Path, tmp_path: Path) -> Callable[[str, str], None]:
    """Commit a file through a scratch clone of the origin and push it to main."""
    work = tmp_path / "scratch"

    def push(file_name: str, content: str) -> None:
        if not work.exists():
            _git("clone", str(origin_repository), str(work), cwd=tmp_path)
        (work / file_name).write_text(content)
        _git("add", ".", cwd=work)
        _git("commit", "-m", f"update {file_name}", cwd=work)
        _git("push", "origin", "HEAD:main", cwd=work)

    return push
