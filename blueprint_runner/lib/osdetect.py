from __future__ import annotations

import logging
import platform
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

OS_RELEASE = "/etc/os-release"

# AUR helpers in order of preference when picking an Arch default.
AUR_HELPER_PREFERENCE = ("paru", "yay", "trizen", "pamac", "aura", "yaourt")

# distro id (or ID_LIKE entry) -> default manager
_DISTRO_DEFAULTS = {
    "debian": "apt",
    "ubuntu": "apt",
    "linuxmint": "apt",
    "pop": "apt",
    "fedora": "dnf",
    "rhel": "dnf",
    "centos": "dnf",
    "rocky": "dnf",
    "almalinux": "dnf",
    "solus": "eopkg",
    "arch": "pacman",
    "manjaro": "pacman",
    "endeavouros": "pacman",
    "opensuse": "zypper",
    "opensuse-leap": "zypper",
    "opensuse-tumbleweed": "zypper",
    "suse": "zypper",
    "gentoo": "emerge",
    "nixos": "nix",
}


@dataclass(frozen=True)
class OSInfo:
    os: str
    distro: str = ""
    id_like: Tuple[str, ...] = ()
    default_manager: Optional[str] = None


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip().strip('"').strip("'")
    return out


def _read_os_release(path: str) -> Dict[str, str]:
    try:
        return parse_os_release(Path(path).read_text(encoding="utf-8", errors="ignore"))
    except OSError:
        return {}


def _pick_linux_default(
    distro: str,
    id_like: Tuple[str, ...],
    which: Callable[[str], Optional[str]],
) -> Optional[str]:
    manager = None
    for candidate in (distro, *id_like):
        manager = _DISTRO_DEFAULTS.get(candidate)
        if manager:
            break

    if manager == "pacman":
        # Arch-likes default to an AUR helper when one is installed.
        for helper in AUR_HELPER_PREFERENCE:
            if which(helper):
                return helper
    return manager


def detect_os(
    *,
    os_release_path: str = OS_RELEASE,
    which: Callable[[str], Optional[str]] = shutil.which,
    system: Optional[str] = None,
) -> OSInfo:
    """Detect the host OS and its primary package manager (best-effort)."""

    sysname = (system or platform.system()).lower()

    if sysname == "darwin":
        info = OSInfo(os="darwin", distro="macos", default_manager="brew")
    elif sysname == "linux":
        rel = _read_os_release(os_release_path)
        distro = rel.get("ID", "").lower()
        id_like = tuple(x.lower() for x in rel.get("ID_LIKE", "").split() if x)
        info = OSInfo(
            os="linux",
            distro=distro,
            id_like=id_like,
            default_manager=_pick_linux_default(distro, id_like, which),
        )
    else:
        info = OSInfo(os=sysname or "unknown")

    logger.info("OS: os=%s distro=%s default_manager=%s", info.os, info.distro, info.default_manager)
    return info
