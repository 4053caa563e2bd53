"""
Registry lookup — is there a package-manager backend for this distro?

Runs the registry search (``cargo search darling-<id>``) and treats any
stdout as "found". The exit status is deliberately not consulted: an
empty successful search and a failed one (no network, registry down)
both read as "not found". This matches how the backends have always
been discovered and is a known limitation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.errors import InstallationStepError
from darling_installer.core.models.action import Invocation, Receipt
from darling_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)


@dataclass
class RegistryLookup:
    """Outcome of one registry search."""

    package: str
    found: bool
    output: str = ""
    receipt: Receipt | None = None

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "found": self.found,
            "exit_status": self.receipt.exit_status if self.receipt else None,
        }


def lookup_distro_module(
    distro_id: str,
    runner: ProcessAdapter,
    settings: InstallerSettings | None = None,
) -> RegistryLookup:
    """Search the registry for the product's backend for ``distro_id``.

    Raises:
        InstallationStepError: If the search command cannot be started.
    """
    settings = settings or InstallerSettings()
    package = settings.registry_package(distro_id)

    receipt = runner.run(
        Invocation(argv=[*settings.registry_search, package], capture=True),
    )
    if not receipt.started:
        raise InstallationStepError("Registry search", receipt.error or package)

    output = receipt.output or ""
    if receipt.failed:
        logger.warning(
            "Registry search for %s exited with code %s; judging by output only",
            package, receipt.exit_status,
        )

    found = bool(output)
    logger.info("Registry lookup %s: %s", package, "found" if found else "not found")
    return RegistryLookup(package=package, found=found, output=output, receipt=receipt)
