"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from darling_installer.adapters.mock import MockAdapter
from darling_installer.core.models.action import Invocation
from darling_installer.core.models.settings import InstallerSettings

OS_RELEASE_ARCH = """\
NAME="Arch Linux"
PRETTY_NAME="Arch Linux"
ID=arch
BUILD_ID=rolling
"""


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    """An os-release file identifying Arch Linux."""
    path = tmp_path / "os-release"
    path.write_text(OS_RELEASE_ARCH)
    return path


@pytest.fixture
def settings(os_release: Path) -> InstallerSettings:
    """Default settings pointed at the fixture os-release file."""
    return InstallerSettings(os_release=str(os_release))


def simulate_clone(invocation: Invocation) -> None:
    """Side effect of `git clone`: create the checkout directory."""
    checkout = Path(invocation.cwd) / "darling"
    checkout.mkdir()
    (checkout / "Cargo.toml").write_text("[package]\nname = \"darling\"\n")


@pytest.fixture
def runner() -> MockAdapter:
    """A host with git and cargo, where cloning actually creates the checkout."""
    mock = MockAdapter(installed=("git", "cargo"))
    mock.on_run("git clone", simulate_clone)
    return mock


@pytest.fixture
def make_runner():
    """Factory for mock hosts with the given commands installed."""

    def _make(*installed: str) -> MockAdapter:
        mock = MockAdapter(installed=installed)
        mock.on_run("git clone", simulate_clone)
        return mock

    return _make
