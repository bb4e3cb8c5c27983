"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from winccoa_marketplace.utils.constants import DEFAULT_ORGANIZATION, DEFAULT_WINCCOA_VERSION


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    TOKEN = "token"
    ANONYMOUS = "anonymous"


@dataclass
class MarketplaceConfig:
    """Reconciled configuration shared by the service and the CLI."""

    github_auth_type: GitHubAuthenticationType
    default_project_dir: Path
    github_api_url: str = "https://api.github.com"
    github_token: str | None = None
    default_organization: str = DEFAULT_ORGANIZATION
    winccoa_version: str = DEFAULT_WINCCOA_VERSION
    git_executable: str = "git"
    npm_executable: str = "npm"
    npx_executable: str = "npx"
    debug: bool = False
