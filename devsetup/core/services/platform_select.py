"""
Platform selection — menu choice, explicit flag, or /etc/os-release.

Invalid input raises SelectionError; there is no retry loop.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devsetup.core.errors import SelectionError
from devsetup.core.models.platform import PLATFORMS, PlatformId, PlatformProfile

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# os-release ID → supported platform
_OS_RELEASE_IDS: dict[str, PlatformId] = {
    "ubuntu": PlatformId.UBUNTU,
    "fedora": PlatformId.FEDORA,
    "arch": PlatformId.ARCH,
}


def menu_lines() -> list[str]:
    """``1) Ubuntu`` style lines, in menu order."""
    profiles = sorted(PLATFORMS.values(), key=lambda p: p.menu_key)
    return [f"{p.menu_key}) {p.label}" for p in profiles]


def platform_from_choice(choice: str) -> PlatformProfile:
    """Map a menu key ("1".."3") or a platform id to its profile.

    Raises:
        SelectionError: For anything else.
    """
    value = (choice or "").strip().lower()
    for profile in PLATFORMS.values():
        if value in (profile.menu_key, profile.id.value):
            return profile
    raise SelectionError(f"Invalid choice: {choice!r}. Expected 1, 2 or 3.")


def read_os_release_id(path: Path = OS_RELEASE) -> str | None:
    """The ``ID=`` value of an os-release file, or None."""
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    return line.strip().split("=", 1)[1].strip('"').lower()
    except OSError:
        logger.debug("Cannot read %s", path)
    return None


def detect_platform(path: Path = OS_RELEASE) -> PlatformProfile:
    """Detect the running distribution.

    Raises:
        SelectionError: If it is unknown or unsupported.
    """
    os_id = read_os_release_id(path)
    if os_id is None:
        raise SelectionError(f"Cannot detect distribution: {path} missing or has no ID")
    platform_id = _OS_RELEASE_IDS.get(os_id)
    if platform_id is None:
        raise SelectionError(f"Unsupported distribution: {os_id!r}")
    logger.info("Detected distribution %s", os_id)
    return PLATFORMS[platform_id]
