"""Remote repository metadata adapter for the githubkit library."""

from typing import Any, Self

import structlog
from githubkit import Response
from githubkit.versions.latest.models import FullRepository, MinimalRepository

from winccoa_marketplace.configuration.models import GitHubAuthenticationType
from winccoa_marketplace.utils.retry import retry_on_rate_limit

from .abc import RepositoryMetadataClientBase, RepositorySortKey, RepositoryVisibility, SortDirection
from .client import GitHubClient, get_github_client

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class GitHubKitAdapter(RepositoryMetadataClientBase):
    """Remote repository metadata adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, authenticated: bool) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self._authenticated = authenticated

    @classmethod
    async def create(
        cls,
        github_auth_type: GitHubAuthenticationType,
        github_token: str | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new adapter, authenticated when a token is configured."""
        logger.info(
            "Creating client for GitHub instance",
            github_api_url=github_api_url,
            github_auth_type=github_auth_type.value,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_token=github_token,
            github_api_url=github_api_url,
        )
        return cls(client, authenticated=github_auth_type == GitHubAuthenticationType.TOKEN)

    @property
    def is_authenticated(self) -> bool:
        """Whether the client sends credentials with its requests."""
        return self._authenticated

    @retry_on_rate_limit()
    async def list_organization_repositories_page(
        self,
        org: str,
        visibility: RepositoryVisibility = "all",
        sort_key: RepositorySortKey = "updated",
        sort_direction: SortDirection = "desc",
        per_page: int = 100,
        page: int = 1,
    ) -> list[MinimalRepository]:
        """Fetch a single page of an organization's repositories."""
        logger.debug("Fetching organization repositories page", org=org, page=page, per_page=per_page)
        response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(
            org=org,
            type=visibility,
            sort=sort_key,
            direction=sort_direction,
            per_page=per_page,
            page=page,
        )
        return response.parsed_data

    @retry_on_rate_limit()
    async def get_repository(self, owner: str, repo: str) -> FullRepository:
        """Get a repository."""
        response: Response[FullRepository] = await self.client.rest.repos.async_get(owner=owner, repo=repo)
        return response.parsed_data

    @retry_on_rate_limit()
    async def get_authenticated_user(self) -> Any:
        """Get the user the client's token belongs to."""
        response = await self.client.rest.users.async_get_authenticated()
        return response.parsed_data
