"""Value objects for repository resolution, synchronization and listing."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from githubkit.utils import UNSET
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from winccoa_marketplace.exceptions import InvalidInputError


@dataclass(frozen=True)
class RepositoryReference:
    """Immutable input to a synchronization: what to fetch and where to put it."""

    url: str
    target_directory: str | None = None
    branch: str | None = None

    def __post_init__(self) -> None:
        """Reject references without a usable URL before any I/O happens."""
        if not self.url or not self.url.strip():
            raise InvalidInputError("Repository URL must not be empty", url=self.url)


@dataclass(frozen=True)
class ResolvedTarget:
    """On-disk location of a repository, recomputed on every synchronization."""

    full_path: Path
    repo_name: str
    already_exists: bool
    is_existing_repository: bool


@dataclass(frozen=True)
class PullSummary:
    """Change statistics of a fast-forward pull."""

    changes: int = 0
    insertions: int = 0
    deletions: int = 0
    files: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a clone-or-synchronize call."""

    path: Path
    changed: bool
    cloned: bool = False
    insertions: int = 0
    deletions: int = 0
    files_touched: list[str] = field(default_factory=list)
    manifest_content: str | None = None


class RemoteRepositorySummary(BaseModel):
    """Normalized projection of remote repository metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    full_name: str
    description: str | None = None
    language: str | None = None
    stars: int = 0
    forks: int = 0
    size: int = 0
    default_branch: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pushed_at: datetime | None = None
    clone_url: str | None = None
    ssh_url: str | None = None
    homepage: str | None = None
    topics: list[str] = []
    private: bool = False
    visibility: str | None = None
    archived: bool = False
    disabled: bool = False
    fork: bool = False
    has_issues: bool = False
    has_projects: bool = False
    has_wiki: bool = False
    has_pages: bool = False
    has_downloads: bool = False
    license: str | None = None

    @classmethod
    def from_remote(cls, repo: Any) -> "RemoteRepositorySummary":
        """Build a summary from a remote repository record (githubkit model or similar)."""
        license_info = _remote_field(repo, "license_") or _remote_field(repo, "license")
        return cls(
            name=repo.name,
            full_name=repo.full_name,
            description=_remote_field(repo, "description"),
            language=_remote_field(repo, "language"),
            stars=_remote_field(repo, "stargazers_count", 0),
            forks=_remote_field(repo, "forks_count", 0),
            size=_remote_field(repo, "size", 0),
            default_branch=_remote_field(repo, "default_branch"),
            created_at=_remote_field(repo, "created_at"),
            updated_at=_remote_field(repo, "updated_at"),
            pushed_at=_remote_field(repo, "pushed_at"),
            clone_url=_remote_field(repo, "clone_url"),
            ssh_url=_remote_field(repo, "ssh_url"),
            homepage=_remote_field(repo, "homepage"),
            topics=list(_remote_field(repo, "topics", [])),
            private=bool(_remote_field(repo, "private", False)),
            visibility=_remote_field(repo, "visibility"),
            archived=bool(_remote_field(repo, "archived", False)),
            disabled=bool(_remote_field(repo, "disabled", False)),
            fork=bool(_remote_field(repo, "fork", False)),
            has_issues=bool(_remote_field(repo, "has_issues", False)),
            has_projects=bool(_remote_field(repo, "has_projects", False)),
            has_wiki=bool(_remote_field(repo, "has_wiki", False)),
            has_pages=bool(_remote_field(repo, "has_pages", False)),
            has_downloads=bool(_remote_field(repo, "has_downloads", False)),
            license=_remote_field(license_info, "name") if license_info else None,
        )


def _remote_field(record: Any, name: str, default: Any = None) -> Any:
    """Read an optional field of a remote record, treating null and unset values alike."""
    value = getattr(record, name, None)
    if value is None or value is UNSET:
        return default
    return value
