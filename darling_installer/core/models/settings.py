"""
Installer settings — where things come from and where they go.

Every path except ``os_release`` is relative: working, share and profile
paths hang off the user's home directory, ``build_output`` hangs off the
checked-out source. Callers resolve them against a concrete home with
the ``*_path`` helpers so the model itself never reads the environment.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from darling_installer.core.models.module import Module

DEFAULT_REPOSITORY = "https://github.com/darling-package-manager/darling.git"


def default_catalog() -> list[Module]:
    """Built-in optional modules, in the order they are offered."""
    return [
        Module(name="cargo", readable_name="Cargo", detection_commands=("cargo",)),
        Module(
            name="vscode",
            readable_name="Visual Studio Code",
            detection_commands=("code", "codium"),
        ),
    ]


class InstallerSettings(BaseModel):
    """Validated installer configuration."""

    product: str = "darling"
    repository: str = DEFAULT_REPOSITORY
    requirements: list[str] = Field(default_factory=lambda: ["git", "cargo"])
    os_release: str = "/etc/os-release"

    # ── Relative to $HOME ───────────────────────────────────────
    work_dir: str = ".tmp/darling"
    share_dir: str = ".local/share/darling"
    profile: str = ".bashrc"

    # ── Relative to the source checkout ─────────────────────────
    build_output: str = "target/release"

    registry_search: list[str] = Field(default_factory=lambda: ["cargo", "search"])
    build_command: list[str] = Field(
        default_factory=lambda: ["cargo", "build", "--release"],
    )
    strict_exit_codes: bool = False

    modules: list[Module] = Field(default_factory=default_catalog)

    @property
    def clone_dir_name(self) -> str:
        """Directory name ``git clone`` creates for the repository."""
        name = self.repository.rstrip("/").rsplit("/", 1)[-1]
        return name.removesuffix(".git") or self.product

    def work_path(self, home: Path) -> Path:
        return home / self.work_dir

    def share_path(self, home: Path) -> Path:
        return home / self.share_dir

    def source_path(self, home: Path) -> Path:
        return self.share_path(home) / "source"

    def bin_path(self, home: Path) -> Path:
        return self.source_path(home) / self.build_output

    def profile_path(self, home: Path) -> Path:
        return home / self.profile

    def registry_package(self, distro_id: str) -> str:
        """Registry package name for a distro backend, e.g. ``darling-arch``."""
        return f"{self.product}-{distro_id}"
