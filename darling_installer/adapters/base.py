"""
Process adapter base — the contract between the installer and the OS.

The installer never calls ``subprocess`` or ``shutil.which`` directly.
It talks to a ProcessAdapter, which lets the whole workflow run against
a scripted mock in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from darling_installer.core.models.action import Invocation, Receipt


class ProcessAdapter(ABC):
    """Abstract base class for process runners.

    Adapters perform external side effects and return receipts.
    They never raise: failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def which(self, command: str) -> str | None:
        """Resolve ``command`` on the executable search path.

        Returns the resolved path, or None when the command is absent.
        Absence is a normal outcome, never an exception.
        """

    @abstractmethod
    def run(self, invocation: Invocation) -> Receipt:
        """Run the invocation to completion and return a receipt.

        MUST never raise. Spawn failures yield a ``not_started`` receipt,
        non-zero exits a ``failed`` one.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
