"""Base ABC for remote repository metadata clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal

RepositoryVisibility = Literal["all", "public", "private", "forks", "sources", "member"]
RepositorySortKey = Literal["created", "updated", "pushed", "full_name"]
SortDirection = Literal["asc", "desc"]


class RepositoryMetadataClientBase(ABC):
    """Base ABC for remote repository metadata clients."""

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """Whether the client sends credentials with its requests."""
        pass

    @abstractmethod
    async def list_organization_repositories_page(
        self,
        org: str,
        visibility: RepositoryVisibility = "all",
        sort_key: RepositorySortKey = "updated",
        sort_direction: SortDirection = "desc",
        per_page: int = 100,
        page: int = 1,
    ) -> list[Any]:
        """Fetch a single page of an organization's repositories."""
        pass

    @abstractmethod
    async def get_repository(self, owner: str, repo: str) -> Any:
        """Get a repository."""
        pass

    @abstractmethod
    async def get_authenticated_user(self) -> Any:
        """Get the user the client's credentials belong to."""
        pass
