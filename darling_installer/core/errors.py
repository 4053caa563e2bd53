"""
Installer errors — everything that aborts a run.

Raising any ``InstallerError`` ends the run: the CLI prints the message
and exits non-zero. Per-module install failures are NOT errors; they are
reported from their receipts and the run continues.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for fatal installer errors."""


class MissingRequirementError(InstallerError):
    """A required executable is not on PATH."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(
            f"Missing requirement {command}. Please install it before proceeding."
        )


class DistroDetectionError(InstallerError):
    """The OS-release file could not be read."""


class InstallationCancelled(InstallerError):
    """The user declined a gating confirmation."""


class HomeNotSetError(InstallerError):
    """``HOME`` is not set, so no install location can be derived."""

    def __init__(self) -> None:
        super().__init__("HOME is not set; cannot determine where to install.")


class InstallationStepError(InstallerError):
    """A filesystem or process step of the installation failed."""

    def __init__(self, step: str, detail: str):
        self.step = step
        self.detail = detail
        super().__init__(f"{step} failed: {detail}")
