"""Installs and builds the JavaScript packages shipped with a sub-project."""

import os
import shutil
from pathlib import Path

import structlog

from winccoa_marketplace.execution.classifier import ExitClassification, classify_exit_code
from winccoa_marketplace.execution.results import CommandExecutionResult
from winccoa_marketplace.execution.runner import CommandRunner
from winccoa_marketplace.subprojects.models import DirectoryInstallResult, InstallReport
from winccoa_marketplace.utils.constants import EXCLUDED_WALK_DIRECTORIES, JAVASCRIPT_DIRECTORY, PACKAGE_MANIFEST_FILENAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def find_package_directories(root: Path) -> list[Path]:
    """Collect directories under root (root included) that contain a package manifest.

    The walk is depth-first with entries visited in sorted order, so the result
    is deterministic. Dependency caches are never descended into. A missing
    root yields an empty list.
    """
    if not root.is_dir():
        return []

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_WALK_DIRECTORIES)
        if PACKAGE_MANIFEST_FILENAME in filenames:
            logger.debug("Found package manifest", directory=dirpath)
            found.append(Path(dirpath))
    return found


def resolve_executable(name: str) -> str:
    """Resolve an executable on PATH so that wrapper scripts (npm.cmd) can be started directly."""
    return shutil.which(name) or name


class NodeInstaller:
    """Runs ``npm install`` then ``npx tsc`` in every package directory of a sub-project."""

    def __init__(self, runner: CommandRunner | None = None, npm_executable: str = "npm", npx_executable: str = "npx") -> None:
        self.runner = runner or CommandRunner()
        self.npm_executable = npm_executable
        self.npx_executable = npx_executable

    async def install_and_build(self, project_path: str | Path) -> InstallReport:
        """Install dependencies and compile every package under the project's javascript directory.

        Directories are processed one at a time. A failing directory does not
        stop the others; its failure is reported in the returned InstallReport.
        """
        root = Path(project_path) / JAVASCRIPT_DIRECTORY
        directories = find_package_directories(root)
        if not directories:
            logger.info("No JavaScript packages to install", root=str(root))
            return InstallReport(root=root)

        report = InstallReport(root=root)
        for directory in directories:
            report.directories.append(await self._install_directory(directory))

        if report.failed:
            logger.error("JavaScript package installation failed", root=str(root), failed=[str(d.directory) for d in report.failed])
        else:
            logger.info("Installed JavaScript packages", root=str(root), count=len(report.directories))
        return report

    async def _install_directory(self, directory: Path) -> DirectoryInstallResult:
        logger.info("Installing and building package", directory=str(directory))
        results: list[CommandExecutionResult] = []

        install = await self.runner.execute(resolve_executable(self.npm_executable), "install", cwd=directory)
        results.append(install)
        classification = classify_exit_code(install.exit_code)
        if classification == ExitClassification.ERROR:
            logger.error("npm install failed, skipping build", directory=str(directory), details=install.format_details())
            return DirectoryInstallResult(directory=directory, results=results, classification=classification)

        build = await self.runner.execute(resolve_executable(self.npx_executable), "tsc", cwd=directory)
        results.append(build)
        classification = classify_exit_code(build.exit_code)
        if classification == ExitClassification.ERROR:
            logger.error("TypeScript build failed", directory=str(directory), details=build.format_details())
        return DirectoryInstallResult(directory=directory, results=results, classification=classification)
