"""Paginated listing of an organization's remote repositories."""

import structlog
from githubkit.exception import RequestError, RequestFailed
from pydantic import ValidationError

from winccoa_marketplace.exceptions import AccessDeniedError, InvalidInputError, ListingFailedError, MarketplaceError, OrganizationNotFoundError
from winccoa_marketplace.github.abc import RepositoryMetadataClientBase, RepositorySortKey, RepositoryVisibility, SortDirection
from winccoa_marketplace.repositories.models import RemoteRepositorySummary
from winccoa_marketplace.utils.constants import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def translate_listing_failure(exc: Exception, org: str) -> MarketplaceError:
    """Map a failed remote listing call onto the error taxonomy by HTTP status."""
    status_code = exc.response.status_code if isinstance(exc, RequestFailed) else None
    if status_code == 404:
        return OrganizationNotFoundError(f"Organization '{org}' not found", org=org, status_code=status_code, detail=str(exc))
    if status_code == 403:
        return AccessDeniedError(
            f"Access denied to organization '{org}'. Check your GitHub token permissions.",
            org=org,
            status_code=status_code,
            detail=str(exc),
        )
    return ListingFailedError(f"Failed to list repositories for organization '{org}'", org=org, status_code=status_code, detail=str(exc))


class RemoteRepositoryLister:
    """Lists an organization's repositories page by page through a metadata client."""

    def __init__(self, client: RepositoryMetadataClientBase) -> None:
        self.client = client

    async def list_organization_repositories(
        self,
        org: str,
        visibility: RepositoryVisibility = "all",
        sort_key: RepositorySortKey = "updated",
        sort_direction: SortDirection = "desc",
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> list[RemoteRepositorySummary]:
        """List repositories of an organization, in the order the remote returns them.

        Pages are requested one after another and listing stops at the first
        page shorter than ``page_size`` or after ``max_pages`` pages, whichever
        comes first.

        Raises:
            InvalidInputError: The organization is empty
            OrganizationNotFoundError: The remote answers 404
            AccessDeniedError: The remote answers 403
            ListingFailedError: Any other failure, including records that do not fit the summary model
        """
        if not org or not org.strip():
            raise InvalidInputError("Organization name must not be empty")

        logger.info(
            "Listing organization repositories",
            org=org,
            visibility=visibility,
            sort_key=sort_key,
            sort_direction=sort_direction,
            authenticated=self.client.is_authenticated,
        )
        summaries: list[RemoteRepositorySummary] = []
        for page in range(1, max_pages + 1):
            try:
                records = await self.client.list_organization_repositories_page(
                    org,
                    visibility=visibility,
                    sort_key=sort_key,
                    sort_direction=sort_direction,
                    per_page=page_size,
                    page=page,
                )
            except (RequestFailed, RequestError) as e:
                error = translate_listing_failure(e, org)
                logger.error("Failed to list organization repositories", org=org, page=page, error_kind=error.kind.value, error=str(e))
                raise error from e

            try:
                summaries.extend(RemoteRepositorySummary.from_remote(record) for record in records)
            except ValidationError as e:
                logger.error("Unexpected repository record in listing", org=org, page=page, error=str(e))
                raise translate_listing_failure(e, org) from e
            logger.debug("Fetched repositories page", org=org, page=page, count=len(records))
            if len(records) < page_size:
                break
        else:
            logger.warning("Stopped listing at page limit, results may be truncated", org=org, max_pages=max_pages)

        logger.info("Listed organization repositories", org=org, count=len(summaries))
        return summaries
