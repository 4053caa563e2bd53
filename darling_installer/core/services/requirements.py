"""
Requirement checks — are the tools the installer shells out to present?
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.errors import MissingRequirementError
from darling_installer.core.interaction import Interaction

logger = logging.getLogger(__name__)


def has_requirement(
    command: str,
    runner: ProcessAdapter,
    interaction: Interaction | None = None,
) -> bool:
    """Check one executable and report the result.

    Absence is a normal return value, never an exception.
    """
    found = runner.which(command) is not None
    logger.debug("Requirement %s: %s", command, "found" if found else "missing")

    if interaction is not None:
        if found:
            interaction.notify(f"\t{command} is installed ✔", style="success")
        else:
            interaction.notify(f"\t{command} is not installed ✘", style="error")
    return found


def check_requirements(
    commands: Iterable[str],
    runner: ProcessAdapter,
    interaction: Interaction | None = None,
) -> dict[str, bool]:
    """Check every command, reporting each one. Never raises."""
    return {
        command: has_requirement(command, runner, interaction)
        for command in commands
    }


def require_all(
    commands: Iterable[str],
    runner: ProcessAdapter,
    interaction: Interaction | None = None,
) -> None:
    """Check commands in order, stopping at the first missing one.

    Raises:
        MissingRequirementError: naming the first absent command.
    """
    for command in commands:
        if not has_requirement(command, runner, interaction):
            raise MissingRequirementError(command)
