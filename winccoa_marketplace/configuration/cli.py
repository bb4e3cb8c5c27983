"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
from pathlib import Path

import typer
from dotenv import load_dotenv
from githubkit.exception import RequestFailed
from typer import Argument, Option
from typing_extensions import Annotated

from winccoa_marketplace.configuration.exceptions import GitHubAuthenticationConfigurationError
from winccoa_marketplace.configuration.models import MarketplaceConfig
from winccoa_marketplace.configuration.reconcile import reconcile_configuration
from winccoa_marketplace.exceptions import MarketplaceError
from winccoa_marketplace.execution.classifier import ExitClassification
from winccoa_marketplace.github.abc import RepositoryVisibility
from winccoa_marketplace.github.adapter import GitHubKitAdapter
from winccoa_marketplace.repositories.lister import RemoteRepositoryLister
from winccoa_marketplace.repositories.models import RemoteRepositorySummary
from winccoa_marketplace.service import MarketplaceService
from winccoa_marketplace.subprojects.installer import NodeInstaller
from winccoa_marketplace.utils.logger import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Clone, update and list WinCC OA add-on repositories.")


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = None,
    github_token: Annotated[str | None, Option(envvar="GITHUB_TOKEN", help="GitHub personal access token.")] = None,
    project_dir: Annotated[
        Path | None, Option(envvar="DEFAULT_PROJECT_DIR", help="Directory repositories are cloned into when no target is given.")
    ] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Reconcile configuration shared by every command."""
    configure_logging(debug)
    try:
        config = asyncio.run(
            reconcile_configuration(
                github_api_url=github_api_url,
                github_token=github_token,
                default_project_dir=project_dir,
                debug=debug,
            )
        )
    except GitHubAuthenticationConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


async def _create_service(config: MarketplaceConfig) -> MarketplaceService:
    return await MarketplaceService.create(config)


@typer_app.command(name="clone")
def clone_cli(
    ctx: typer.Context,
    url: Annotated[str, Argument(help="Repository URL (HTTPS or SSH).")],
    target_dir: Annotated[
        str | None, Option("--target-dir", help="Directory to clone into, or an existing working copy or container directory.")
    ] = None,
    branch: Annotated[str | None, Option("--branch", help="Branch to check out on initial clone.")] = None,
) -> None:
    """Clone a repository, or bring an existing working copy up to date."""
    config: MarketplaceConfig = ctx.obj["config"]

    async def clone() -> dict[str, str | None]:
        service = await _create_service(config)
        return await service.clone(url, target_directory=target_dir, branch=branch)

    try:
        result = asyncio.run(clone())
    except MarketplaceError as exc:
        typer.echo(f"Error ({exc.kind.value}): {exc}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"Repository available at {result['repositoryPath']}")
    if result["manifestContent"] is not None:
        typer.echo(result["manifestContent"])
    else:
        typer.echo("No add-on manifest found in repository")


@typer_app.command(name="pull")
def pull_cli(
    ctx: typer.Context,
    path: Annotated[str, Argument(help="Path of the working copy, or its name under the project directory.")],
) -> None:
    """Fast-forward an existing working copy."""
    config: MarketplaceConfig = ctx.obj["config"]

    async def pull() -> int:
        service = await _create_service(config)
        return await service.pull(path)

    try:
        changes = asyncio.run(pull())
    except MarketplaceError as exc:
        typer.echo(f"Error ({exc.kind.value}): {exc}", err=True)
        raise typer.Exit(1) from exc

    if changes:
        typer.echo(f"Updated {changes} file(s)")
    else:
        typer.echo("Already up to date")


@typer_app.command(name="list-repos")
def list_repos_cli(
    ctx: typer.Context,
    organization: Annotated[str | None, Argument(help="Organization to list, defaults to DEFAULT_ORGANIZATION.")] = None,
    visibility: Annotated[str, Option("--visibility", help="Repository type filter: all, public, private, forks, sources, member.")] = "public",
    max_pages: Annotated[int, Option("--max-pages", min=1, help="Maximum number of pages of 100 repositories to fetch.")] = 10,
    as_json: Annotated[bool, Option("--json", help="Print the full listing as JSON.")] = False,
) -> None:
    """List the repositories of an organization, most recently updated first."""
    config: MarketplaceConfig = ctx.obj["config"]
    org = organization or config.default_organization
    if visibility not in ("all", "public", "private", "forks", "sources", "member"):
        typer.echo(f"Invalid visibility: {visibility}", err=True)
        raise typer.Exit(2)
    repository_visibility: RepositoryVisibility = visibility  # type: ignore[assignment]

    async def list_repos() -> list[RemoteRepositorySummary]:
        adapter = await GitHubKitAdapter.create(
            github_auth_type=config.github_auth_type,
            github_token=config.github_token,
            github_api_url=config.github_api_url,
        )
        lister = RemoteRepositoryLister(adapter)
        return await lister.list_organization_repositories(org, visibility=repository_visibility, max_pages=max_pages)

    try:
        summaries = asyncio.run(list_repos())
    except MarketplaceError as exc:
        typer.echo(f"Error ({exc.kind.value}): {exc}", err=True)
        raise typer.Exit(1) from exc

    if as_json:
        typer.echo(json.dumps([summary.model_dump(mode="json", by_alias=True) for summary in summaries], indent=2))
        return
    typer.echo(f"Found {len(summaries)} repositories in organization '{org}':")
    for summary in summaries:
        description = f" - {summary.description}" if summary.description else ""
        typer.echo(f"  - {summary.full_name} ({summary.stars} stars){description}")


@typer_app.command(name="install")
def install_cli(
    ctx: typer.Context,
    path: Annotated[Path, Argument(help="Sub-project directory whose JavaScript packages are installed and built.")],
) -> None:
    """Install and build the JavaScript packages of a sub-project without registering it."""
    config: MarketplaceConfig = ctx.obj["config"]
    if not path.is_dir():
        typer.echo(f"Sub-project directory not found: {path.absolute()}", err=True)
        raise typer.Exit(1)

    installer = NodeInstaller(npm_executable=config.npm_executable, npx_executable=config.npx_executable)
    report = asyncio.run(installer.install_and_build(path))
    if not report.directories:
        typer.echo(f"No JavaScript packages found under {report.root}")
        return
    for directory in report.directories:
        status = "failed" if directory.classification == ExitClassification.ERROR else "ok"
        typer.echo(f"  - {directory.directory}: {status}")
    if report.failed:
        typer.echo(f"{len(report.failed)} package(s) failed to install or build", err=True)
        raise typer.Exit(1)


@typer_app.command(name="whoami")
def whoami_cli(ctx: typer.Context) -> None:
    """Show the GitHub user the configured token belongs to."""
    config: MarketplaceConfig = ctx.obj["config"]

    async def whoami() -> object:
        service = await _create_service(config)
        return await service.get_authenticated_user()

    try:
        user = asyncio.run(whoami())
    except MarketplaceError as exc:
        typer.echo(f"Error ({exc.kind.value}): {exc}", err=True)
        raise typer.Exit(1) from exc
    except RequestFailed as exc:
        typer.echo(f"GitHub rejected the request with status {exc.response.status_code}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Authenticated as {getattr(user, 'login', user)}")


if __name__ == "__main__":
    typer_app()
