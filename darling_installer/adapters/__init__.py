"""Adapters — process bindings for external tools.

Public re-exports for convenient access.
"""

from darling_installer.adapters.base import ProcessAdapter
from darling_installer.adapters.mock import MockAdapter
from darling_installer.adapters.shell.command import ShellCommandAdapter

__all__ = [
    "MockAdapter",
    "ProcessAdapter",
    "ShellCommandAdapter",
]
