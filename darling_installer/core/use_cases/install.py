"""
Install use case — the full interactive installation, start to finish.

This is the top-level workflow: it checks for an existing install,
verifies requirements, detects the distro, offers the distro backend and
any applicable catalog modules, confirms the plan, then hands off to the
executor for the irreversible steps.

Every question goes through an Interaction and every external command
through a ProcessAdapter, so the whole flow can be scripted in tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.engine.executor import (
    EnvironmentEffect,
    ExecutionReport,
    ModuleInstallOutcome,
    apply_environment_effect,
    build_source,
    clone_source,
    environment_effect,
    install_modules,
    prepare_directories,
    remove_previous_install,
)
from darling_installer.core.errors import HomeNotSetError, InstallationCancelled
from darling_installer.core.interaction import Interaction
from darling_installer.core.models.action import Receipt
from darling_installer.core.models.module import InstallationPlan, Module, PlannedModule
from darling_installer.core.models.settings import InstallerSettings
from darling_installer.core.services.catalog import scan_applicable
from darling_installer.core.services.distro import detect_distro, readable_distro_name
from darling_installer.core.services.registry_lookup import RegistryLookup, lookup_distro_module
from darling_installer.core.services.requirements import require_all

logger = logging.getLogger(__name__)

EffectApplier = Callable[[EnvironmentEffect], None]


@dataclass
class InstallResult:
    """Result of one installer run.

    ``outcome`` is ``installed`` when the executor ran, ``declined`` when
    the user said no at the final "Proceed?", and ``no-distro`` when the
    os-release file had no ID and there was nothing to offer.
    """

    outcome: str = ""
    plan: InstallationPlan = field(default_factory=InstallationPlan)
    distro_id: str | None = None
    lookup: RegistryLookup | None = None
    applicable: list[Module] = field(default_factory=list)
    report: ExecutionReport | None = None

    @property
    def installed(self) -> bool:
        return self.outcome == "installed"

    def to_dict(self) -> dict:
        result: dict = {
            "outcome": self.outcome,
            "distro_id": self.distro_id,
            "reinstall": self.plan.is_reinstallation,
            "modules": [m.model_dump() for m in self.plan.modules],
            "applicable": [m.name for m in self.applicable],
        }
        if self.lookup:
            result["registry"] = self.lookup.to_dict()
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def _plural(count: int) -> tuple[str, str]:
    return ("is", "") if count == 1 else ("are", "s")


def _confirm_reinstall(
    settings: InstallerSettings,
    runner: ProcessAdapter,
    interaction: Interaction,
    plan: InstallationPlan,
) -> None:
    if runner.which(settings.product) is None:
        return
    if not interaction.confirm(
        f"It looks like {settings.product} is already installed. "
        "Would you like to reinstall it?"
    ):
        raise InstallationCancelled("Cancelling installation.")
    plan.is_reinstallation = True


def _offer_distro_module(
    distro_id: str,
    settings: InstallerSettings,
    runner: ProcessAdapter,
    interaction: Interaction,
    plan: InstallationPlan,
) -> RegistryLookup:
    interaction.notify(f"It looks like you're on {distro_id} Linux.", style="detail")
    lookup = lookup_distro_module(distro_id, runner, settings)

    if not lookup.found:
        interaction.notify(
            f"Currently, there is no locatable {settings.product} implementation "
            f"for {distro_id} Linux's package manager.",
            style="error",
        )
        if not interaction.confirm("Do you wish to continue the installation?"):
            raise InstallationCancelled(f"Cancelling {settings.product} installation.")
        return lookup

    interaction.notify(
        f"There exists an implementation of {settings.product} "
        f"for {distro_id} Linux's package manager.",
        style="success",
    )
    if interaction.confirm("Do you wish to install this module?"):
        plan.add(readable_distro_name(distro_id), distro_id)
    return lookup


def _select_catalog_modules(
    settings: InstallerSettings,
    runner: ProcessAdapter,
    interaction: Interaction,
    plan: InstallationPlan,
) -> list[Module]:
    interaction.notify("\nScanning for applicable modules...", style="heading")
    applicable = scan_applicable(settings.modules, runner)

    verb, suffix = _plural(len(applicable))
    interaction.notify(
        "Based on applications you have installed, "
        f"there {verb} {len(applicable)} module{suffix} you may find useful."
    )
    if not applicable:
        return applicable

    choices = interaction.choose(
        "Please select the modules you'd like to install (you can change this at any time):",
        [module.label for module in applicable],
    )
    for index in choices:
        plan.add_module(applicable[index])
    return applicable


def _confirm_plan(
    settings: InstallerSettings,
    interaction: Interaction,
    plan: InstallationPlan,
) -> bool:
    interaction.notify(f"\nInstalling {settings.product} with modules:", style="heading")
    if not plan.modules:
        interaction.notify("\t(none)", style="detail")
    for module in plan.modules:
        interaction.notify(f"\t{module.label}", style="detail")
    return interaction.confirm("Proceed?")


def execute_plan(
    plan: InstallationPlan,
    settings: InstallerSettings,
    runner: ProcessAdapter,
    interaction: Interaction,
    home: Path,
    environ: MutableMapping[str, str],
    apply_effect: EffectApplier | None = None,
) -> ExecutionReport:
    """Run the irreversible steps for an approved plan."""
    report = ExecutionReport()

    def _warn(step: str, receipt: Receipt) -> None:
        interaction.notify(
            f"Warning: {step} exited with code {receipt.exit_status}; "
            "the installation may be incomplete.",
            style="warning",
        )

    if plan.is_reinstallation:
        remove_previous_install(settings, home)
    prepare_directories(settings, home)

    interaction.notify(f"\nDownloading {settings.product}...", style="heading")
    report.clone = clone_source(settings, home, runner, on_exit_warning=_warn)

    interaction.notify(f"\nBuilding {settings.product}...", style="heading")
    report.build = build_source(settings, home, runner, on_exit_warning=_warn)

    effect = environment_effect(settings, home)
    search_path = effect.extended_path(environ.get("PATH"))
    if apply_effect is None:
        apply_environment_effect(effect, environ)
    else:
        apply_effect(effect)
    report.effect = effect

    def _started(module: PlannedModule) -> None:
        interaction.notify(f"\tInstalling module for {module.label}...", style="success")

    def _done(outcome: ModuleInstallOutcome) -> None:
        if not outcome.ok:
            interaction.notify(f"\tError: {outcome.receipt.error}", style="error")

    report.modules = install_modules(
        plan, settings, runner,
        search_path=search_path,
        on_start=_started,
        on_done=_done,
    )
    return report


def run_install(
    settings: InstallerSettings,
    runner: ProcessAdapter,
    interaction: Interaction,
    environ: MutableMapping[str, str] | None = None,
    apply_effect: EffectApplier | None = None,
) -> InstallResult:
    """Run the interactive installation.

    Args:
        settings: Installer configuration.
        runner: Process adapter for every external command.
        interaction: Where questions are asked and progress is shown.
        environ: Process environment; defaults to ``os.environ``. HOME is
            read from it and PATH is extended in it.
        apply_effect: Override for applying the PATH effect. Defaults to
            ``apply_environment_effect`` against ``environ``.

    Returns:
        InstallResult describing what happened.

    Raises:
        InstallerError: On any fatal condition, including declining the
            reinstall or continue-without-backend questions.
    """
    if environ is None:
        environ = os.environ
    result = InstallResult()
    plan = result.plan

    _confirm_reinstall(settings, runner, interaction, plan)

    interaction.notify("\nChecking requirements...", style="heading")
    require_all(settings.requirements, runner, interaction)
    interaction.notify("Good news! All requirements are installed.\n", style="success")

    result.distro_id = detect_distro(settings.os_release)
    if result.distro_id is None:
        logger.warning("No ID field in %s; nothing to install", settings.os_release)
        interaction.notify(
            f"Could not determine your Linux distribution from {settings.os_release}.",
            style="warning",
        )
        result.outcome = "no-distro"
        return result

    result.lookup = _offer_distro_module(
        result.distro_id, settings, runner, interaction, plan,
    )
    result.applicable = _select_catalog_modules(settings, runner, interaction, plan)

    if not _confirm_plan(settings, interaction, plan):
        logger.info("User declined the installation plan")
        result.outcome = "declined"
        return result

    home = environ.get("HOME")
    if not home:
        raise HomeNotSetError()

    logger.info(
        "Installing %s with modules: %s",
        settings.product, ", ".join(plan.names) or "(none)",
    )
    result.report = execute_plan(
        plan, settings, runner, interaction,
        home=Path(home),
        environ=environ,
        apply_effect=apply_effect,
    )
    result.outcome = "installed"

    interaction.notify("\nInstallation complete!", style="success")
    interaction.notify(f"To use {settings.product}, open a new shell.")
    interaction.notify(
        f"To use {settings.product} in your current shell, "
        f"run . ~/{settings.profile}"
    )
    return result
