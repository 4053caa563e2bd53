"""
Distro detection — which Linux distribution are we on?

Reads the ``ID=`` field of the os-release file. Only the field at the
start of a line counts, so ``VERSION_ID=`` and ``VARIANT_ID=`` never
match regardless of where they appear.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from darling_installer.core.errors import DistroDetectionError

logger = logging.getLogger(__name__)

DEFAULT_OS_RELEASE = "/etc/os-release"

_ID_PATTERN = re.compile(r"^ID=(\S+)", re.MULTILINE)


def parse_distro_id(text: str) -> str | None:
    """Extract the distro identifier from os-release content.

    Returns the exact token after ``ID=`` up to whitespace, quotes and
    all, or None when the field is absent.
    """
    match = _ID_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1)


def detect_distro(os_release: str | Path = DEFAULT_OS_RELEASE) -> str | None:
    """Read the os-release file and return the distro identifier.

    Raises:
        DistroDetectionError: If the file cannot be read, for any reason.
    """
    path = Path(os_release)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise DistroDetectionError(f"Cannot read {path}: {e}") from e

    distro_id = parse_distro_id(text)
    logger.info("Detected distro id: %s", distro_id or "(none)")
    return distro_id


def readable_distro_name(distro_id: str) -> str:
    """Display name for a distro module: ``opensuse-tumbleweed`` → ``Opensuse Tumbleweed``."""
    return distro_id.replace("-", " ").replace("_", " ").title()
