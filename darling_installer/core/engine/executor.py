"""
Installation executor — the irreversible part of the run.

Takes an approved plan and performs, in order:

    remove old install (reinstall only) → create dirs → clone → move
    → build → environment effect → install each module

Each phase is a separate function so the use case can sequence them and
tests can exercise them one at a time. Fatal problems raise
``InstallationStepError``; per-module install failures are collected as
receipts and never stop the loop.

The PATH change is not applied here. ``environment_effect`` only
describes it; ``apply_environment_effect`` is the boundary that touches
the process environment and the shell profile.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.errors import InstallationStepError
from darling_installer.core.models.action import Invocation, Receipt
from darling_installer.core.models.module import InstallationPlan, PlannedModule
from darling_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Called with a step name and the non-zero receipt when a clone or build
# exits non-zero outside strict mode.
ExitWarning = Callable[[str, Receipt], None]


@dataclass(frozen=True)
class EnvironmentEffect:
    """A PATH entry to add, now and for future shells."""

    path_entry: str
    profile_path: Path

    @property
    def profile_line(self) -> str:
        return f'\nexport PATH="$PATH:{self.path_entry}"\n'

    def extended_path(self, current: str | None) -> str:
        """``current`` with the entry appended."""
        if not current:
            return self.path_entry
        return f"{current}{os.pathsep}{self.path_entry}"


@dataclass
class ModuleInstallOutcome:
    """Result of installing one planned module."""

    module: PlannedModule
    receipt: Receipt

    @property
    def ok(self) -> bool:
        return self.receipt.ok

    def to_dict(self) -> dict:
        return {
            "name": self.module.name,
            "readable_name": self.module.readable_name,
            "status": self.receipt.status,
            "exit_status": self.receipt.exit_status,
            "error": self.receipt.error,
        }


@dataclass
class ExecutionReport:
    """What the executor did."""

    clone: Receipt | None = None
    build: Receipt | None = None
    effect: EnvironmentEffect | None = None
    modules: list[ModuleInstallOutcome] = field(default_factory=list)

    @property
    def failed_modules(self) -> list[ModuleInstallOutcome]:
        return [m for m in self.modules if not m.ok]

    @property
    def status(self) -> str:
        if not self.failed_modules:
            return "ok"
        return "partial"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "clone": self.clone.status if self.clone else None,
            "build": self.build.status if self.build else None,
            "path_entry": self.effect.path_entry if self.effect else None,
            "modules": [m.to_dict() for m in self.modules],
        }


# ── Filesystem setup ────────────────────────────────────────────


def remove_previous_install(settings: InstallerSettings, home: Path) -> None:
    """Best-effort removal of an earlier installation.

    A missing directory is not an error, so nothing here is.
    """
    target = settings.share_path(home)
    logger.info("Removing previous installation at %s", target)
    shutil.rmtree(target, ignore_errors=True)


def prepare_directories(settings: InstallerSettings, home: Path) -> tuple[Path, Path]:
    """Create the working and share directories.

    Returns:
        (work_path, share_path)

    Raises:
        InstallationStepError: If either directory cannot be created.
    """
    work = settings.work_path(home)
    share = settings.share_path(home)
    for directory in (work, share):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallationStepError("Creating directories", f"{directory}: {e}") from e
    return work, share


# ── External steps ──────────────────────────────────────────────


def _checked(
    step: str,
    receipt: Receipt,
    settings: InstallerSettings,
    on_exit_warning: ExitWarning | None,
) -> Receipt:
    """Apply the exit-status policy shared by clone and build.

    A process that could not start is always fatal. A non-zero exit is
    fatal only in strict mode; otherwise it is logged and reported and
    the run goes on, which can leave a half-built installation behind.
    """
    if not receipt.started:
        raise InstallationStepError(step, receipt.error or "process did not start")

    if receipt.failed:
        if settings.strict_exit_codes:
            raise InstallationStepError(step, f"exited with code {receipt.exit_status}")
        logger.warning("%s exited with code %s; continuing", step, receipt.exit_status)
        if on_exit_warning is not None:
            on_exit_warning(step, receipt)
    return receipt


def clone_source(
    settings: InstallerSettings,
    home: Path,
    runner: ProcessAdapter,
    on_exit_warning: ExitWarning | None = None,
) -> Receipt:
    """Clone the repository into the working directory and move it into place.

    Raises:
        InstallationStepError: If git cannot start, or the checkout cannot
            be moved to the source directory.
    """
    work = settings.work_path(home)
    receipt = runner.run(
        Invocation(argv=["git", "clone", settings.repository], cwd=str(work)),
    )
    _checked("Cloning source", receipt, settings, on_exit_warning)

    checkout = work / settings.clone_dir_name
    source = settings.source_path(home)
    logger.debug("Moving %s to %s", checkout, source)
    try:
        checkout.rename(source)
    except OSError as e:
        raise InstallationStepError("Moving source", f"{checkout} -> {source}: {e}") from e
    return receipt


def build_source(
    settings: InstallerSettings,
    home: Path,
    runner: ProcessAdapter,
    on_exit_warning: ExitWarning | None = None,
) -> Receipt:
    """Build the release binary inside the source directory."""
    receipt = runner.run(
        Invocation(
            argv=list(settings.build_command),
            cwd=str(settings.source_path(home)),
        ),
    )
    return _checked("Building source", receipt, settings, on_exit_warning)


# ── Environment effect ──────────────────────────────────────────


def environment_effect(settings: InstallerSettings, home: Path) -> EnvironmentEffect:
    """Describe the PATH change that exposes the freshly built binary."""
    return EnvironmentEffect(
        path_entry=str(settings.bin_path(home)),
        profile_path=settings.profile_path(home),
    )


def apply_environment_effect(
    effect: EnvironmentEffect,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """Apply an EnvironmentEffect to ``environ`` and the shell profile.

    ``environ`` defaults to ``os.environ``. The profile is appended to,
    and created if absent.

    Raises:
        InstallationStepError: If the profile cannot be written.
    """
    if environ is None:
        environ = os.environ
    environ["PATH"] = effect.extended_path(environ.get("PATH"))

    try:
        with effect.profile_path.open("a", encoding="utf-8") as profile:
            profile.write(effect.profile_line)
    except OSError as e:
        raise InstallationStepError("Updating shell profile", f"{effect.profile_path}: {e}") from e
    logger.info("Added %s to PATH and %s", effect.path_entry, effect.profile_path)


# ── Modules ─────────────────────────────────────────────────────


def install_module(
    module: PlannedModule,
    settings: InstallerSettings,
    runner: ProcessAdapter,
    search_path: str | None = None,
) -> ModuleInstallOutcome:
    """Run ``<product> module install <name>``. Never raises."""
    env = {"PATH": search_path} if search_path else {}
    receipt = runner.run(
        Invocation(argv=[settings.product, "module", "install", module.name], env=env),
    )
    if not receipt.ok:
        logger.warning("Module %s failed: %s", module.name, receipt.error)
    return ModuleInstallOutcome(module=module, receipt=receipt)


def install_modules(
    plan: InstallationPlan,
    settings: InstallerSettings,
    runner: ProcessAdapter,
    search_path: str | None = None,
    on_start: Callable[[PlannedModule], None] | None = None,
    on_done: Callable[[ModuleInstallOutcome], None] | None = None,
) -> list[ModuleInstallOutcome]:
    """Install every planned module in plan order, never stopping early.

    Nothing is rolled back when a module fails.
    """
    outcomes = []
    for module in plan.modules:
        if on_start is not None:
            on_start(module)
        outcome = install_module(module, settings, runner, search_path)
        if on_done is not None:
            on_done(outcome)
        outcomes.append(outcome)
    return outcomes
