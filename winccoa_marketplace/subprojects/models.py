"""Pydantic schema for sub-project configuration and registration outcomes."""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from winccoa_marketplace.execution.classifier import ExitClassification
from winccoa_marketplace.execution.results import CommandExecutionResult
from winccoa_marketplace.utils.constants import PLACEHOLDER_SUBPROJECT_VERSION


class StartMode(str, Enum):
    """How the project monitor starts a manager."""

    ALWAYS = "always"
    MANUAL = "manual"
    ONCE = "once"
    UNKNOWN = ""


class ManagerConfig(BaseModel):
    """Pydantic model for a manager declared by an add-on."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(alias="Name")
    start_mode: StartMode = Field(default=StartMode.UNKNOWN, alias="StartMode")
    options: str = Field(default="", alias="Options")

    @field_validator("start_mode", mode="before")
    @classmethod
    def normalize_start_mode(cls, value: Any) -> StartMode:
        """Map start modes the project monitor does not know onto UNKNOWN."""
        if isinstance(value, StartMode):
            return value
        try:
            return StartMode(str(value or "").strip().lower())
        except ValueError:
            return StartMode.UNKNOWN


class SubProjectConfig(BaseModel):
    """Pydantic model for the configuration of a sub-project to register."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repo_name: str = Field(default="", alias="RepoName")
    keywords: list[str] = Field(default_factory=list, alias="Keywords")
    subproject: str = Field(default="", alias="Subproject")
    version: str = Field(default="", alias="Version")
    description: str = Field(default="", alias="Description")
    platform_version: str = Field(default="", alias="OaVersion")
    managers: list[ManagerConfig] = Field(default_factory=list, alias="Managers")
    data_lists: list[str] = Field(default_factory=list, alias="Dplists")
    update_scripts: list[str] = Field(default_factory=list, alias="UpdateScripts")

    @classmethod
    def placeholder(cls) -> "SubProjectConfig":
        """Configuration used when a caller supplies none: a version and nothing else."""
        return cls(version=PLACEHOLDER_SUBPROJECT_VERSION)

    @classmethod
    def from_manifest(cls, manifest: str | dict[str, Any]) -> "SubProjectConfig":
        """Parse an add-on manifest, given as JSON text or an already-decoded mapping."""
        data = json.loads(manifest) if isinstance(manifest, str) else manifest
        return cls.model_validate(data)


@dataclass(frozen=True)
class RegisteredSubProject:
    """A project known to the project administration."""

    name: str
    path: str


@dataclass(frozen=True)
class ManagerAttachmentResult:
    """Outcome of attaching one manager to the running project."""

    manager: ManagerConfig
    succeeded: bool
    error: str | None = None


@dataclass(frozen=True)
class DirectoryInstallResult:
    """Outcome of installing and building one JavaScript package directory."""

    directory: Path
    results: list[CommandExecutionResult]
    classification: ExitClassification


@dataclass(frozen=True)
class InstallReport:
    """Outcome of the dependency bootstrap of a sub-project."""

    root: Path
    directories: list[DirectoryInstallResult] = field(default_factory=list)

    @property
    def failed(self) -> list[DirectoryInstallResult]:
        """Directories whose install or build classified as an error."""
        return [d for d in self.directories if d.classification == ExitClassification.ERROR]


@dataclass(frozen=True)
class RegistrationOutcome:
    """Outcome of registering a sub-project and attaching its managers."""

    path: str
    project_name: str
    return_code: int
    installation: InstallReport
    managers: list[ManagerAttachmentResult] = field(default_factory=list)

    @property
    def failed_managers(self) -> list[ManagerConfig]:
        """Managers that could not be attached, in the order they were tried."""
        return [m.manager for m in self.managers if not m.succeeded]

    @property
    def succeeded(self) -> bool:
        """Whether the sub-project was registered and every manager attached."""
        return self.return_code >= 0 and not self.failed_managers
