"""Boundary to the WinCC OA control-script runtime.

The project administration (sub-project registry, project monitor) is only
reachable through CTRL functions executed inside a running WinCC OA manager.
Adapters embed ``PROJECT_ADMINISTRATION_SCRIPT`` and expose its functions
through ``ControlScriptRunner``.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Sequence


class CtrlType(str, Enum):
    """CTRL types of the arguments passed to a control-script function."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    FLOAT = "float"


class ControlScriptRunner(ABC):
    """Base ABC for runtimes able to execute CTRL functions."""

    @abstractmethod
    async def run_function(
        self,
        name: str,
        args: Sequence[Any] = (),
        arg_types: Sequence[CtrlType] = (),
    ) -> Any:
        """Run a function of the project administration script and return its result."""
        pass

    @abstractmethod
    def get_paths(self) -> list[str]:
        """Return the configured project paths; the first is the project, the last the installation."""
        pass


PROJECT_ADMINISTRATION_SCRIPT = """
#uses "CtrlPv2Admin"

string subProjName(string path)
{
  strreplace(path, "\\\\", "/");
  strreplace(path, "//", "/");
  dyn_string parts = strsplit(path, "/");
  return dynlen(parts) > 0 ? parts[dynlen(parts)] : "";
}

string subProjParent(string path)
{
  strreplace(path, "\\\\", "/");
  strreplace(path, "//", "/");
  dyn_string parts = strsplit(path, "/");
  string parent;
  for (int i = 1; i < dynlen(parts); i++)
    parent += parts[i] + "/";
  return parent;
}

int registerSubProj(string path)
{
  string name = subProjName(path);
  int ret = paRegProj(name, subProjParent(path), "", 0, true);
  if (ret < 0)
    return ret;

  dyn_string subProjects;
  paGetSubProjs(PROJ, subProjects);
  if (!subProjects.contains(name))
  {
    subProjects.append(name);
    paSetSubProjs(PROJ, subProjects);
  }
  return ret;
}

int unregisterSubProj(string path)
{
  string name = subProjName(path);
  dyn_string subProjects;
  paGetSubProjs(PROJ, subProjects);
  if (subProjects.contains(name))
  {
    subProjects.removeAt(subProjects.indexOf(name, 0));
    paSetSubProjs(PROJ, subProjects);
  }
  return paDelProj(name, true);
}

dyn_dyn_string listSubProjs()
{
  dyn_string projects, versions, paths;
  paGetProjs(projects, versions, paths);
  return makeDynAnytype(projects, paths);
}

bool addManager(string manager, string startMode, string options, string user, string pwd)
{
  string host, port;
  bool err;
  paGetProjHostPort(PROJ, host, port);
  ProjEnvProject proj = new ProjEnvProject(PROJ);
  dyn_anytype managers = proj.getListOfManagersStati();
  pmonInsertManager(err, PROJ, dynlen(managers), makeDynString(manager, startMode, 2, 2, 30, options), user, pwd);
  return err;
}

string getComponentPath(int componentId)
{
  return WINCCOA_BIN_PATH + getComponentName(componentId);
}

string getDplistPath(string fileName)
{
  return getPath(DPLIST_REL_PATH, fileName);
}
"""
"""CTRL library implementing the project administration functions called by the registrar."""
