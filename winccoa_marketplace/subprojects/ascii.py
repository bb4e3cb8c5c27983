"""Imports data-point lists into the running project with the WinCC OA ASCII manager."""

from pathlib import Path

import structlog

from winccoa_marketplace.execution.classifier import ExitClassification, classify_exit_code
from winccoa_marketplace.execution.runner import CommandRunner
from winccoa_marketplace.subprojects.control import ControlScriptRunner
from winccoa_marketplace.subprojects.environment import EnvironmentPaths
from winccoa_marketplace.utils.constants import (
    ASCII_COMPONENT_ID,
    ASCII_SUCCESS_EXIT_CODES,
    ASCII_WARNING_EXIT_CODES,
    DEFAULT_WINCCOA_VERSION,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class AsciiImporter:
    """Runs the ASCII manager against data-point list files of the project.

    Exit code 55 means the import completed with warnings and counts as
    success; any exit code outside the success and warning sets is a failure.
    """

    def __init__(
        self,
        control: ControlScriptRunner,
        runner: CommandRunner | None = None,
        winccoa_version: str = DEFAULT_WINCCOA_VERSION,
    ) -> None:
        self.paths = EnvironmentPaths(control, winccoa_version=winccoa_version)
        self.runner = runner or CommandRunner()

    async def build_import_command(
        self, file_name: str, confirm: bool = False, verbose: bool = True, use_dbd_files: bool = False
    ) -> list[str]:
        """Build the ASCII manager command line, or an empty list when a path cannot be resolved."""
        if not file_name or not file_name.strip():
            logger.error("Invalid or empty data list file name")
            return []

        ascii_manager_path = (await self.paths.get_component_path(ASCII_COMPONENT_ID)).strip()
        import_file_path = (await self.paths.get_data_list_path(file_name, use_dbd_files=use_dbd_files)).strip()
        project_name = self.paths.get_project_name().strip()
        if not ascii_manager_path or not import_file_path or not project_name:
            logger.error(
                "Could not resolve paths for data list import",
                ascii_manager_path=ascii_manager_path,
                import_file_path=import_file_path,
                project_name=project_name,
            )
            return []

        if not Path(import_file_path).is_file():
            logger.error("Data list file does not exist", import_file_path=import_file_path)
            return []

        command = [ascii_manager_path, "-in", import_file_path]
        if not verbose:
            command.append("-noVerbose")
        command.extend(["-PROJ", project_name, "-yes" if confirm else "-no"])
        return command

    async def import_file(
        self,
        file_name: str,
        confirm: bool = False,
        log_warnings: bool = False,
        verbose: bool = True,
        use_dbd_files: bool = False,
    ) -> bool:
        """Import one data-point list file.

        Args:
            file_name: File name relative to the project's dplist directory
            confirm: Change data-point types without asking (``-yes``); otherwise nothing is changed (``-no``)
            log_warnings: Log the command details when the import completes with warnings
            verbose: Let the ASCII manager report verbosely
            use_dbd_files: Look the file up in the installation's version-specific dbdfiles directory instead of the project's dplist directory

        Returns:
            True when the import succeeded or completed with warnings
        """
        command = await self.build_import_command(file_name, confirm=confirm, verbose=verbose, use_dbd_files=use_dbd_files)
        if not command:
            return False

        result = await self.runner.execute(*command)
        classification = classify_exit_code(result.exit_code, ASCII_SUCCESS_EXIT_CODES, ASCII_WARNING_EXIT_CODES)
        if classification == ExitClassification.SUCCESS:
            logger.info("Imported data list", file_name=file_name)
            return True
        if classification == ExitClassification.WARNING:
            if log_warnings:
                logger.warning("Data list import completed with warnings", file_name=file_name, details=result.format_details())
            return True

        logger.error("Data list import failed", file_name=file_name, details=result.format_details())
        return False

    async def import_files(
        self, file_names: list[str], confirm: bool = False, log_warnings: bool = False, use_dbd_files: bool = False
    ) -> dict[str, bool]:
        """Import several files one after another; a failing file does not stop the rest."""
        results: dict[str, bool] = {}
        for file_name in file_names:
            results[file_name] = await self.import_file(file_name, confirm=confirm, log_warnings=log_warnings, use_dbd_files=use_dbd_files)
        return results
