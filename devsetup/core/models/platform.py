"""
Platform model — one record per supported distribution.

A PlatformProfile carries everything that differs between distributions:
the package manager identity, its refresh command and its install
command. Profiles are looked up once per run and never mutated.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class PlatformId(StrEnum):
    """Supported distributions."""

    UBUNTU = "ubuntu"
    FEDORA = "fedora"
    ARCH = "arch"


class PackageManager(StrEnum):
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"


class PlatformProfile(BaseModel):
    """Package-manager identity and command templates for a distribution."""

    model_config = ConfigDict(frozen=True)

    id: PlatformId
    label: str
    menu_key: str
    package_manager: PackageManager
    update_command: tuple[str, ...] = ()   # empty: install refreshes itself
    install_command: tuple[str, ...]       # package names are appended

    def update_argv(self) -> list[str]:
        """Refresh command, or an empty list when the platform has none."""
        return list(self.update_command)

    def install_argv(self, packages: list[str] | tuple[str, ...]) -> list[str]:
        """Single batch install command for ``packages``."""
        return [*self.install_command, *packages]


PLATFORMS: dict[PlatformId, PlatformProfile] = {
    PlatformId.UBUNTU: PlatformProfile(
        id=PlatformId.UBUNTU,
        label="Ubuntu",
        menu_key="1",
        package_manager=PackageManager.APT,
        update_command=("apt", "update"),
        install_command=("apt", "install", "-y"),
    ),
    PlatformId.FEDORA: PlatformProfile(
        id=PlatformId.FEDORA,
        label="Fedora",
        menu_key="2",
        package_manager=PackageManager.DNF,
        install_command=("dnf", "install", "-y"),
    ),
    PlatformId.ARCH: PlatformProfile(
        id=PlatformId.ARCH,
        label="Arch",
        menu_key="3",
        package_manager=PackageManager.PACMAN,
        install_command=("pacman", "-Syu", "--noconfirm"),
    ),
}


def get_platform(platform_id: PlatformId | str) -> PlatformProfile:
    """Look up a profile by id. Raises ValueError for unknown ids."""
    return PLATFORMS[PlatformId(platform_id)]
