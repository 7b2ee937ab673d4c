"""Package-manager registry.

Explicit managers have dedicated install/remove templates. AUR helper names are
an alias layer on top of the table: they always resolve to the OS default
entry, never to a template of their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .errors import InitConfigError, UnsupportedManagerError
from .lib.osdetect import OSInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageManagerInfo:
    name: str
    install: str
    remove: str
    elevated: bool = False


def _pm(name: str, install: str, remove: str, elevated: bool) -> PackageManagerInfo:
    return PackageManagerInfo(name=name, install=install, remove=remove, elevated=elevated)


MANAGER_TEMPLATES: Mapping[str, PackageManagerInfo] = {
    "brew": _pm("brew", "brew install", "brew uninstall", False),
    "apt": _pm("apt", "apt-get install -y", "apt-get remove -y", True),
    "dnf": _pm("dnf", "dnf install -y", "dnf remove -y", True),
    "eopkg": _pm("eopkg", "eopkg install -y", "eopkg remove -y", True),
    "pacman": _pm("pacman", "pacman -S --noconfirm --needed", "pacman -R --noconfirm", True),
    "zypper": _pm("zypper", "zypper install -y", "zypper remove -y", True),
    "emerge": _pm("emerge", "emerge --noreplace", "emerge --unmerge", True),
    "nix": _pm("nix", "nix-env -iA", "nix-env -e", False),
    "cargo": _pm("cargo", "cargo install", "cargo uninstall", False),
}

KNOWN_MANAGERS = tuple(MANAGER_TEMPLATES)

AUR_HELPERS = ("yay", "paru", "trizen", "yaourt", "pamac", "aura")

# Only used to build the default entry when the OS default is an AUR helper.
_AUR_DEFAULT_TEMPLATES: Mapping[str, PackageManagerInfo] = {
    "yay": _pm("yay", "yay -S --noconfirm --needed", "yay -R --noconfirm", False),
    "paru": _pm("paru", "paru -S --noconfirm --needed", "paru -R --noconfirm", False),
    "trizen": _pm("trizen", "trizen -S --noconfirm --needed", "trizen -R --noconfirm", False),
    "yaourt": _pm("yaourt", "yaourt -S --noconfirm --needed", "yaourt -R --noconfirm", False),
    "pamac": _pm("pamac", "pamac install --no-confirm", "pamac remove --no-confirm", False),
    "aura": _pm("aura", "aura -A --noconfirm", "aura -R --noconfirm", True),
}


class ManagerRegistry:
    """Read-only lookup built once per run."""

    def __init__(
        self,
        default: Optional[PackageManagerInfo],
        managers: Mapping[str, PackageManagerInfo] = MANAGER_TEMPLATES,
    ) -> None:
        self._default = default
        self._managers: Dict[str, PackageManagerInfo] = dict(managers)

    @classmethod
    def from_os_info(cls, os_info: OSInfo) -> "ManagerRegistry":
        name = os_info.default_manager
        default = None
        if name:
            default = MANAGER_TEMPLATES.get(name) or _AUR_DEFAULT_TEMPLATES.get(name)
            if default is None:
                logger.warning("Detected default package manager %s has no templates", name)
        return cls(default=default)

    @property
    def default(self) -> Optional[PackageManagerInfo]:
        return self._default

    def _require_default(self, identifier: str, unit: str) -> PackageManagerInfo:
        if self._default is None:
            what = f"package manager {identifier}" if identifier else "default package manager"
            raise UnsupportedManagerError(unit, f"no default package manager detected for {what}")
        return self._default

    def resolve(self, identifier: str = "", *, unit: str = "") -> PackageManagerInfo:
        identifier = (identifier or "").strip()

        if not identifier:
            pm = self._require_default(identifier, unit)
            logger.debug("Using default package manager: %s", pm.name)
            return pm

        if identifier in AUR_HELPERS:
            logger.debug("Using AUR package manager: %s", identifier)
            return self._require_default(identifier, unit)

        pm = self._managers.get(identifier)
        if pm is None:
            raise UnsupportedManagerError(unit, f"unsupported package manager: {identifier}")
        logger.debug("Using %s package manager", pm.name)
        return pm

    def with_default(self, name: str) -> "ManagerRegistry":
        """Copy of this registry with another explicit default (e.g. from config)."""

        pm = self._managers.get(name) or _AUR_DEFAULT_TEMPLATES.get(name)
        if pm is None:
            raise InitConfigError(f"unsupported default package manager: {name}")
        return ManagerRegistry(default=pm, managers=self._managers)


def resolve_manager(identifier: str, os_info: OSInfo) -> PackageManagerInfo:
    return ManagerRegistry.from_os_info(os_info).resolve(identifier)
