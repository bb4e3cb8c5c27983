"""Reconcile configuration from command line options and environment settings."""

import os
import sys
from pathlib import Path

import structlog

from winccoa_marketplace.configuration.env import Settings, settings
from winccoa_marketplace.configuration.exceptions import GitHubAuthenticationConfigurationError
from winccoa_marketplace.configuration.models import GitHubAuthenticationType, MarketplaceConfig
from winccoa_marketplace.utils.constants import WINCCOA_PROJECT_DIRECTORY_VALUE, WINCCOA_REGISTRY_PATH_TEMPLATE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def validate_github_authentication_configuration(
    github_token: str | None,
    require_token: bool = False,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Listing public repositories works without credentials, so a missing token
    falls back to anonymous access unless the caller requires a token.

    Args:
        github_token (str | None): The GitHub personal access token.
        require_token (bool): Whether anonymous access is acceptable.

    Raises:
        GitHubAuthenticationConfigurationError: If a token is required but not provided,
            or if the token is blank.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    if github_token is not None and not github_token.strip():
        raise GitHubAuthenticationConfigurationError("The configured GitHub token is blank. Unset GITHUB_TOKEN or provide a valid token.")

    if github_token:
        return GitHubAuthenticationType.TOKEN

    if require_token:
        raise GitHubAuthenticationConfigurationError(
            "No GitHub authentication configuration provided. Please provide a token "
            "(command line option --github-token, environment variable GITHUB_TOKEN)."
        )
    return GitHubAuthenticationType.ANONYMOUS


def read_registry_project_directory(winccoa_version: str) -> Path | None:
    """Read the WinCC OA project directory from the Windows registry.

    Returns None on other platforms or when the key or value is absent.
    """
    if sys.platform != "win32":
        return None

    import winreg

    key_path = WINCCOA_REGISTRY_PATH_TEMPLATE.format(version=winccoa_version)
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key_path) as key:
            value, _ = winreg.QueryValueEx(key, WINCCOA_PROJECT_DIRECTORY_VALUE)
    except OSError as e:
        logger.warning("Could not read WinCC OA project directory from registry", key=key_path, error=str(e))
        return None

    if not value:
        return None
    logger.debug("Read WinCC OA project directory from registry", key=key_path, project_dir=value)
    return Path(value)


def get_default_project_directory(configured_directory: Path | None, winccoa_version: str) -> Path:
    """Resolve the directory repositories are cloned into when no target is given.

    An explicitly configured directory wins, then the WinCC OA installation's
    registered project directory, then the current working directory.
    """
    if configured_directory is not None:
        return configured_directory.absolute()

    registry_directory = read_registry_project_directory(winccoa_version)
    if registry_directory is not None:
        return registry_directory

    cwd = Path(os.getcwd())
    logger.info("No project directory configured, using current working directory", project_dir=str(cwd))
    return cwd


async def reconcile_configuration(
    github_api_url: str | None = None,
    github_token: str | None = None,
    default_organization: str | None = None,
    default_project_dir: Path | None = None,
    debug: bool | None = None,
    require_token: bool = False,
    env_settings: Settings | None = None,
) -> MarketplaceConfig:
    """Merge command line values over environment settings into a single configuration.

    Values passed explicitly take precedence; anything left as None falls back
    to the environment settings.
    """
    env_settings = env_settings or settings
    token = github_token if github_token is not None else env_settings.GITHUB_TOKEN
    github_auth_type = await validate_github_authentication_configuration(token, require_token=require_token)
    winccoa_version = env_settings.WINCCOA_VERSION

    config = MarketplaceConfig(
        github_auth_type=github_auth_type,
        default_project_dir=get_default_project_directory(
            default_project_dir if default_project_dir is not None else env_settings.DEFAULT_PROJECT_DIR,
            winccoa_version,
        ),
        github_api_url=github_api_url or env_settings.GITHUB_API_URL,
        github_token=token,
        default_organization=default_organization or env_settings.DEFAULT_ORGANIZATION,
        winccoa_version=winccoa_version,
        git_executable=env_settings.GIT_EXECUTABLE,
        npm_executable=env_settings.NPM_EXECUTABLE,
        npx_executable=env_settings.NPX_EXECUTABLE,
        debug=env_settings.DEBUG if debug is None else debug,
    )
    logger.debug(
        "Reconciled configuration",
        github_api_url=config.github_api_url,
        github_auth_type=config.github_auth_type.value,
        default_organization=config.default_organization,
        default_project_dir=str(config.default_project_dir),
    )
    return config
