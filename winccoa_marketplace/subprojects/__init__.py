"""Sub-project registration, dependency bootstrap and data-list import."""

from .ascii import AsciiImporter
from .control import PROJECT_ADMINISTRATION_SCRIPT, ControlScriptRunner, CtrlType
from .environment import EnvironmentPaths
from .installer import NodeInstaller, find_package_directories
from .models import (
    DirectoryInstallResult,
    InstallReport,
    ManagerAttachmentResult,
    ManagerConfig,
    RegisteredSubProject,
    RegistrationOutcome,
    StartMode,
    SubProjectConfig,
)
from .registrar import SubProjectRegistrar

__all__ = [
    "AsciiImporter",
    "ControlScriptRunner",
    "CtrlType",
    "DirectoryInstallResult",
    "EnvironmentPaths",
    "InstallReport",
    "ManagerAttachmentResult",
    "ManagerConfig",
    "NodeInstaller",
    "PROJECT_ADMINISTRATION_SCRIPT",
    "RegisteredSubProject",
    "RegistrationOutcome",
    "StartMode",
    "SubProjectConfig",
    "SubProjectRegistrar",
    "find_package_directories",
]
