"""
Module and plan models — what can be installed and what was chosen.

Modules are optional integrations the installed package manager can
manage (an editor integration, a distro package-manager backend). The
catalog is static; the plan is built up interactively during one run
and discarded at exit.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Module(BaseModel):
    """A catalog entry.

    ``detection_commands`` are executables whose presence on PATH makes
    the module worth offering. Order is kept as declared.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str                                 # machine identifier passed to `module install`
    readable_name: str                          # label shown to the user
    detection_commands: tuple[str, ...] = Field(
        default=(), alias="commands",
    )

    @property
    def label(self) -> str:
        return f"{self.readable_name} ({self.name})"


class PlannedModule(BaseModel):
    """A module the user approved for installation."""

    readable_name: str
    name: str

    @property
    def label(self) -> str:
        return f"{self.readable_name} ({self.name})"


class InstallationPlan(BaseModel):
    """Ordered set of approved modules for the current run."""

    modules: list[PlannedModule] = Field(default_factory=list)
    is_reinstallation: bool = False

    def add(self, readable_name: str, name: str) -> PlannedModule:
        """Append a module, keeping insertion order."""
        entry = PlannedModule(readable_name=readable_name, name=name)
        self.modules.append(entry)
        return entry

    def add_module(self, module: Module) -> PlannedModule:
        return self.add(module.readable_name, module.name)

    @property
    def names(self) -> list[str]:
        return [m.name for m in self.modules]
