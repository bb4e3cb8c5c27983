"""Inbound operations of the marketplace, as consumed by an RPC-style service layer."""

import json
from pathlib import Path
from typing import Any, Self

import structlog

from winccoa_marketplace.configuration.models import MarketplaceConfig
from winccoa_marketplace.exceptions import InvalidInputError
from winccoa_marketplace.execution.runner import CommandRunner
from winccoa_marketplace.github.abc import RepositoryMetadataClientBase
from winccoa_marketplace.github.adapter import GitHubKitAdapter
from winccoa_marketplace.repositories.git import GitClient
from winccoa_marketplace.repositories.lister import RemoteRepositoryLister
from winccoa_marketplace.repositories.models import RepositoryReference
from winccoa_marketplace.repositories.paths import PathResolver
from winccoa_marketplace.repositories.synchronize import RepositorySynchronizer
from winccoa_marketplace.subprojects.ascii import AsciiImporter
from winccoa_marketplace.subprojects.control import ControlScriptRunner
from winccoa_marketplace.subprojects.installer import NodeInstaller
from winccoa_marketplace.subprojects.models import SubProjectConfig
from winccoa_marketplace.subprojects.registrar import SubProjectRegistrar

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class MarketplaceService:
    """Facade wiring the synchronizer, lister and registrar behind the inbound operations.

    Operations touching the project administration need a control-script
    runtime; repository operations work without one.
    """

    def __init__(
        self,
        config: MarketplaceConfig,
        metadata_client: RepositoryMetadataClientBase,
        control: ControlScriptRunner | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.metadata_client = metadata_client
        self.control = control
        self.runner = runner or CommandRunner()
        self.synchronizer = RepositorySynchronizer(
            PathResolver(config.default_project_dir),
            GitClient(self.runner, git_executable=config.git_executable),
        )
        self.lister = RemoteRepositoryLister(metadata_client)
        self.installer = NodeInstaller(self.runner, npm_executable=config.npm_executable, npx_executable=config.npx_executable)

    @classmethod
    async def create(cls, config: MarketplaceConfig, control: ControlScriptRunner | None = None) -> Self:
        """Create a service with a githubkit-backed metadata client for the configured instance."""
        metadata_client = await GitHubKitAdapter.create(
            github_auth_type=config.github_auth_type,
            github_token=config.github_token,
            github_api_url=config.github_api_url,
        )
        return cls(config, metadata_client, control=control)

    def _require_control(self) -> ControlScriptRunner:
        if self.control is None:
            raise RuntimeError("This operation requires a WinCC OA control-script runtime.")
        return self.control

    @property
    def registrar(self) -> SubProjectRegistrar:
        return SubProjectRegistrar(self._require_control(), self.installer)

    async def register(self, paths: list[str], configs: dict[str, SubProjectConfig] | None = None) -> bool:
        """Register each path as a sub-project, one after another.

        A path without an explicit configuration is registered with a
        placeholder configuration. Add-on manifests are never consulted.
        Returns whether every path registered with all of its managers.
        """
        configs = configs or {}
        registrar = self.registrar
        all_succeeded = True
        for path in paths:
            config = configs.get(path) or SubProjectConfig.placeholder()
            try:
                outcome = await registrar.register(path, config)
            except Exception as e:
                logger.error("Error registering sub-project", path=path, error=str(e))
                raise
            all_succeeded = all_succeeded and outcome.succeeded
        return all_succeeded

    async def unregister(self, paths: list[str]) -> bool:
        """Unregister each path, one after another; returns whether every call succeeded."""
        registrar = self.registrar
        all_succeeded = True
        for path in paths:
            try:
                return_code = await registrar.unregister(path)
            except Exception as e:
                logger.error("Error unregistering sub-project", path=path, error=str(e))
                raise
            all_succeeded = all_succeeded and return_code >= 0
        return all_succeeded

    async def list_projects(self) -> list[str]:
        """Names of the projects known to the project administration."""
        return [project.name for project in await self.registrar.list_registered()]

    def _resolve_repository_path(self, path_or_name: str) -> Path:
        candidate = Path(path_or_name)
        if candidate.is_absolute() or candidate.exists():
            return candidate
        return self.config.default_project_dir / path_or_name

    async def pull(self, path_or_name: str) -> int:
        """Fast-forward a working copy, given its path or its name under the project directory.

        Returns the number of changed files.
        """
        if not path_or_name or not path_or_name.strip():
            raise InvalidInputError("Repository path must not be empty")
        summary = await self.synchronizer.pull_repository(self._resolve_repository_path(path_or_name))
        return summary.changes

    async def clone(self, url: str, target_directory: str | None = None, branch: str | None = None) -> dict[str, Any]:
        """Clone or synchronize a repository and return its path and add-on manifest."""
        result = await self.synchronizer.sync_repository(RepositoryReference(url=url, target_directory=target_directory, branch=branch))
        return {"repositoryPath": str(result.path), "manifestContent": result.manifest_content}

    async def list_repos(self, organization: str | None = None) -> str:
        """List an organization's public repositories, most recently updated first, as JSON."""
        summaries = await self.lister.list_organization_repositories(
            organization or self.config.default_organization,
            visibility="public",
            sort_key="updated",
            sort_direction="desc",
        )
        return json.dumps([summary.model_dump(mode="json", by_alias=True) for summary in summaries], indent=2)

    async def import_data_lists(self, file_names: list[str], confirm: bool = False, use_dbd_files: bool = False) -> dict[str, bool]:
        """Import data-point list files with the ASCII manager; returns success per file."""
        importer = AsciiImporter(self._require_control(), self.runner, winccoa_version=self.config.winccoa_version)
        return await importer.import_files(file_names, confirm=confirm, use_dbd_files=use_dbd_files)

    async def validate_authentication(self) -> bool:
        """Check that the configured token is accepted by the remote."""
        if not self.metadata_client.is_authenticated:
            logger.info("No GitHub token configured, skipping authentication check")
            return False
        try:
            user = await self.metadata_client.get_authenticated_user()
        except Exception as e:
            logger.error("Authentication validation failed", error=str(e))
            return False
        logger.info("Authenticated to GitHub", login=getattr(user, "login", None))
        return True

    async def get_authenticated_user(self) -> Any:
        """The user the configured token belongs to."""
        if not self.metadata_client.is_authenticated:
            raise InvalidInputError("Not authenticated. Configure a GitHub token to query the authenticated user.")
        return await self.metadata_client.get_authenticated_user()

    async def get_repository_info(self, owner: str, repo: str) -> Any:
        """Metadata of a single repository."""
        if not owner or not repo:
            raise InvalidInputError("Repository owner and name must not be empty", owner=owner, repo=repo)
        return await self.metadata_client.get_repository(owner, repo)
