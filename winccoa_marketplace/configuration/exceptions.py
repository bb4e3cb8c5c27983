"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationError(Exception):
    """Raised when the GitHub authentication configuration is inconsistent."""

    pass

