"""
Package lists — pure data, one ordered list per distribution.

Names follow each distribution's own naming (``libssl-dev`` on Ubuntu,
``openssl-devel`` on Fedora, ``openssl`` on Arch).
"""

from __future__ import annotations

from devsetup.core.models.platform import PlatformId

BASELINE_PACKAGES: tuple[str, ...] = ("curl", "git")

PACKAGE_LISTS: dict[PlatformId, tuple[str, ...]] = {
    PlatformId.UBUNTU: (
        "tmux", "ltrace", "python3", "python3-pip", "vim", "gcc", "g++",
        "make", "gdb", "strace", "build-essential", "libncurses-dev",
        "bison", "flex", "libssl-dev", "libelf-dev", "fakeroot", "ccache",
        "libncurses5-dev", "zsh", "gettext", "libtool", "libtool-bin",
        "autoconf", "automake", "cmake", "pkg-config", "unzip",
    ),
    PlatformId.FEDORA: (
        "tmux", "ltrace", "python3", "python3-pip", "vim", "gcc", "gcc-c++",
        "make", "gdb", "strace", "ncurses-devel", "bison", "flex",
        "openssl-devel", "elfutils-libelf-devel", "fakeroot", "ccache",
        "zsh", "gettext", "libtool", "autoconf", "automake", "cmake",
        "pkgconf-pkg-config", "unzip",
    ),
    PlatformId.ARCH: (
        "tmux", "ltrace", "python", "python-pip", "vim", "gcc", "make",
        "gdb", "strace", "base-devel", "ncurses", "bison", "flex",
        "openssl", "libelf", "fakeroot", "ccache", "zsh", "gettext",
        "libtool", "autoconf", "automake", "cmake", "pkgconf", "unzip",
    ),
}


def packages_for(platform_id: PlatformId, extra: list[str] | None = None) -> list[str]:
    """Ordered, de-duplicated package list for one platform."""
    seen: set[str] = set()
    result: list[str] = []
    for name in (*PACKAGE_LISTS[platform_id], *(extra or [])):
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result
