"""Resolves WinCC OA installation and project paths through the control-script runtime."""

import os
import sys

import structlog

from winccoa_marketplace.subprojects.control import ControlScriptRunner, CtrlType
from winccoa_marketplace.utils.constants import DBD_FILES_DIRECTORY, DBD_VERSION_DIRECTORY_TEMPLATE, DEFAULT_WINCCOA_VERSION

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _normalize(path: str) -> str:
    return os.path.normpath(path) if path else ""


class EnvironmentPaths:
    """Paths of the running WinCC OA environment.

    Lookups never raise: a failed lookup is logged and yields an empty string
    so that callers decide whether they can proceed without it.
    """

    def __init__(self, control: ControlScriptRunner, winccoa_version: str = DEFAULT_WINCCOA_VERSION) -> None:
        self.control = control
        self.winccoa_version = winccoa_version

    async def get_component_path(self, component_id: int) -> str:
        """Absolute path of a WinCC OA component binary, with ``.exe`` appended on Windows."""
        try:
            result = await self.control.run_function("getComponentPath", [component_id], [CtrlType.INT])
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to resolve component path", component_id=component_id, error=str(e))
            return ""

        path = _normalize(str(result or ""))
        if path and sys.platform == "win32" and not path.endswith(".exe"):
            return f"{path}.exe"
        return path

    async def get_data_list_path(self, file_name: str, use_dbd_files: bool = False) -> str:
        """Absolute path of a data-point list file.

        The file is looked up in the project's dplist directory, or with
        use_dbd_files in the installation's definition files for the configured version.
        """
        if not file_name or not file_name.strip():
            logger.error("Invalid or empty data list file name")
            return ""
        if use_dbd_files:
            installation_path = self.get_installation_path()
            if not installation_path:
                return ""
            version_directory = DBD_VERSION_DIRECTORY_TEMPLATE.format(version=self.winccoa_version)
            return _normalize(os.path.join(installation_path, DBD_FILES_DIRECTORY, version_directory, file_name))
        try:
            result = await self.control.run_function("getDplistPath", [file_name], [CtrlType.STRING])
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to resolve data list path", file_name=file_name, error=str(e))
            return ""
        return _normalize(str(result or ""))

    def _get_paths(self) -> list[str]:
        try:
            paths = self.control.get_paths()
        except Exception as e:  # noqa: BLE001
            logger.error("Failed to read project paths", error=str(e))
            return []
        if not isinstance(paths, list) or len(paths) < 2:
            logger.error("Invalid or incomplete project paths returned by the runtime", paths=paths)
            return []
        return paths

    def get_project_path(self) -> str:
        """Path of the running project (the first configured path)."""
        paths = self._get_paths()
        return _normalize(paths[0]) if paths else ""

    def get_installation_path(self) -> str:
        """Path of the WinCC OA installation (the last configured path)."""
        paths = self._get_paths()
        return _normalize(paths[-1]) if paths else ""

    def get_project_name(self) -> str:
        """Name of the running project, taken from the last segment of its path."""
        segments = [s for s in self.get_project_path().strip().replace("\\", "/").split("/") if s]
        return segments[-1] if segments else ""
