"""Registers cloned add-ons as sub-projects of the running WinCC OA project."""

from pathlib import Path

import structlog
from structlog.contextvars import bound_contextvars

from winccoa_marketplace.exceptions import InstallationFailedError, InvalidInputError, RegistrationFailedError
from winccoa_marketplace.subprojects.control import ControlScriptRunner, CtrlType
from winccoa_marketplace.subprojects.installer import NodeInstaller
from winccoa_marketplace.subprojects.models import (
    ManagerAttachmentResult,
    ManagerConfig,
    RegisteredSubProject,
    RegistrationOutcome,
    SubProjectConfig,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

MANAGER_ARGUMENT_TYPES = (CtrlType.STRING,) * 5


def _validate_path(path: str | Path) -> str:
    if not path or not str(path).strip():
        raise InvalidInputError("Sub-project path must not be empty")
    return str(path)


class SubProjectRegistrar:
    """Registers sub-projects and attaches the managers they declare.

    Registration happens in a fixed order: JavaScript dependencies are
    installed and built first, then the project administration registers the
    directory, then managers are attached one after another. Manager
    attachment is best-effort: a failing manager is reported in the outcome
    and the remaining managers are still attached.
    """

    def __init__(self, control: ControlScriptRunner, installer: NodeInstaller | None = None) -> None:
        self.control = control
        self.installer = installer or NodeInstaller()

    async def register(self, path: str | Path, config: SubProjectConfig) -> RegistrationOutcome:
        """Register a directory as a sub-project.

        Raises:
            InvalidInputError: The path is empty
            InstallationFailedError: Installing or building a JavaScript package failed
            RegistrationFailedError: The project administration failed or returned a negative code
        """
        path_str = _validate_path(path)
        project_name = Path(path_str).name

        with bound_contextvars(path=path_str, project_name=project_name):
            installation = await self.installer.install_and_build(path_str)
            if installation.failed:
                failed = [str(d.directory) for d in installation.failed]
                raise InstallationFailedError(
                    f"Failed to install or build JavaScript packages of sub-project at: {path_str}",
                    path=path_str,
                    directories=failed,
                    detail="\n".join(r.failure_text for d in installation.failed for r in d.results if r.exit_code != 0),
                )

            try:
                return_code = int(await self.control.run_function("registerSubProj", [path_str], [CtrlType.STRING]))
            except Exception as e:
                logger.error("Project administration call failed", error=str(e))
                raise RegistrationFailedError(f"Failed to register sub-project at: {path_str}", path=path_str, detail=str(e)) from e
            if return_code < 0:
                logger.error("Project administration refused sub-project registration", return_code=return_code)
                raise RegistrationFailedError(
                    f"Failed to register sub-project at: {path_str}",
                    path=path_str,
                    return_code=return_code,
                )
            logger.info("Registered sub-project", return_code=return_code, version=config.version)

            managers = await self.attach_managers(config.managers)
            outcome = RegistrationOutcome(
                path=path_str,
                project_name=project_name,
                return_code=return_code,
                installation=installation,
                managers=managers,
            )
            if outcome.failed_managers:
                logger.warning("Some managers could not be attached", failed=[m.name for m in outcome.failed_managers])
            return outcome

    async def attach_managers(self, managers: list[ManagerConfig]) -> list[ManagerAttachmentResult]:
        """Attach managers to the running project strictly in the given order.

        Each manager's failure is recorded without affecting the others, so the
        failed subset can be passed back in to retry just those.
        """
        results: list[ManagerAttachmentResult] = []
        for manager in managers:
            logger.info("Adding manager", manager=manager.name, start_mode=manager.start_mode.value, options=manager.options)
            try:
                failed = await self.control.run_function(
                    "addManager",
                    [manager.name, manager.start_mode.value, manager.options, "", ""],
                    MANAGER_ARGUMENT_TYPES,
                )
            except Exception as e:  # noqa: BLE001
                logger.error("Failed to add manager", manager=manager.name, error=str(e))
                results.append(ManagerAttachmentResult(manager=manager, succeeded=False, error=str(e)))
                continue

            if failed:
                logger.error("Project monitor refused manager", manager=manager.name)
                results.append(ManagerAttachmentResult(manager=manager, succeeded=False, error="Project monitor reported an error"))
            else:
                results.append(ManagerAttachmentResult(manager=manager, succeeded=True))
        return results

    async def unregister(self, path: str | Path) -> int:
        """Remove a sub-project from the project and the registry.

        Managers attached at registration time are left in place.
        """
        path_str = _validate_path(path)
        try:
            return_code = int(await self.control.run_function("unregisterSubProj", [path_str], [CtrlType.STRING]))
        except Exception as e:
            raise RegistrationFailedError(f"Failed to unregister sub-project at: {path_str}", path=path_str, detail=str(e)) from e
        logger.info("Unregistered sub-project", path=path_str, return_code=return_code)
        return return_code

    async def list_registered(self) -> list[RegisteredSubProject]:
        """List projects known to the project administration as (name, path) pairs."""
        try:
            result = await self.control.run_function("listSubProjs")
        except Exception as e:
            raise RegistrationFailedError("Failed to list registered sub-projects", detail=str(e)) from e
        if not result:
            return []
        names, paths = (list(result) + [[], []])[:2]
        return [RegisteredSubProject(name=name, path=path) for name, path in zip(names, paths)]
