"""Sets up the githubkit client, authenticated when a token is supplied."""

from typing import Any, TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy

from winccoa_marketplace.configuration.models import GitHubAuthenticationType

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy] | GitHub[UnauthAuthStrategy]


async def get_github_token_client(github_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns a GitHub client authenticated with a personal access token."""
    if not github_token:
        raise RuntimeError("GitHub token authentication requires github_token in config.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_token), base_url=github_api_url, http_cache=False)


async def get_github_anonymous_client(github_api_url: str) -> GitHub[UnauthAuthStrategy]:
    """Returns an unauthenticated GitHub client, limited to public data and lower rate limits."""
    return GitHub(auth=UnauthAuthStrategy(), base_url=github_api_url, http_cache=False)


async def get_github_client(
    github_auth_type: GitHubAuthenticationType,
    github_token: str | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns a GitHub client for the reconciled authentication type.

    The token is passed through untouched; it is never stored or refreshed here.
    """
    client: Any
    if github_auth_type == GitHubAuthenticationType.TOKEN:
        if not github_token:
            raise RuntimeError("GitHub token authentication requires github_token in config.")
        client = await get_github_token_client(github_token, github_api_url)
    else:
        client = await get_github_anonymous_client(github_api_url)
    return client
