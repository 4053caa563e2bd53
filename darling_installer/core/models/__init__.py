"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from darling_installer.core.models import Module, InstallationPlan, Receipt
"""

from darling_installer.core.models.action import Invocation, Receipt
from darling_installer.core.models.module import InstallationPlan, Module, PlannedModule
from darling_installer.core.models.settings import InstallerSettings, default_catalog

__all__ = [
    # module.py
    "InstallationPlan",
    # settings.py
    "InstallerSettings",
    # action.py
    "Invocation",
    "Module",
    "PlannedModule",
    "Receipt",
    "default_catalog",
]
