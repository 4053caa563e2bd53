"""
Module catalog — which optional modules make sense on this machine?
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.core.models.module import Module

logger = logging.getLogger(__name__)


def is_applicable(module: Module, runner: ProcessAdapter) -> bool:
    """A module applies when any of its detection commands is on PATH."""
    return any(runner.which(command) is not None for command in module.detection_commands)


def scan_applicable(catalog: Iterable[Module], runner: ProcessAdapter) -> list[Module]:
    """Filter the catalog to applicable modules, keeping catalog order.

    Unlike requirement checks this prints nothing per probe.
    """
    applicable = [module for module in catalog if is_applicable(module, runner)]
    logger.info(
        "Applicable modules: %s",
        ", ".join(m.name for m in applicable) or "(none)",
    )
    return applicable


def applicability_report(catalog: Iterable[Module], runner: ProcessAdapter) -> list[dict]:
    """Per-module detection detail, for the ``modules`` command."""
    report = []
    for module in catalog:
        found = [c for c in module.detection_commands if runner.which(c) is not None]
        report.append({
            "name": module.name,
            "readable_name": module.readable_name,
            "detection_commands": list(module.detection_commands),
            "found": found,
            "applicable": bool(found),
        })
    return report
