"""Local working copies of add-on repositories and remote repository listing."""

from .git import GitClient
from .lister import RemoteRepositoryLister
from .models import PullSummary, RemoteRepositorySummary, RepositoryReference, ResolvedTarget, SyncResult
from .paths import PathResolver, extract_repo_name
from .synchronize import RepositorySynchronizer

__all__ = [
    "GitClient",
    "PathResolver",
    "PullSummary",
    "RemoteRepositoryLister",
    "RemoteRepositorySummary",
    "RepositoryReference",
    "RepositorySynchronizer",
    "ResolvedTarget",
    "SyncResult",
    "extract_repo_name",
]
