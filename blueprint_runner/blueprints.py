from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .errors import DecodeError
from .lib.formats import decode_bytes


@dataclass(frozen=True)
class PackageEntry:
    """One record of a package blueprint.

    Exactly one of name/names is meaningful; a non-empty `names` wins.
    """

    name: str = ""
    names: Tuple[str, ...] = ()
    package_manager: str = ""
    action: str = ""
    elevated: bool = False

    def units(self) -> List["PackageEntry"]:
        """Expand into one single-name entry per package, in declaration order.

        An entry without any non-blank name expands to nothing.
        """

        if self.names:
            return [replace(self, name=n, names=()) for n in self.names]
        if not self.name:
            return []
        return [self]


@dataclass(frozen=True)
class PackagesData:
    packages: Tuple[PackageEntry, ...] = ()


def _opt_str(raw: Dict[str, Any], key: str, where: str) -> str:
    v = raw.get(key)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise DecodeError(f"{where}: {key} must be a string, got {type(v).__name__}")
    return v.strip()


def parse_package_entry(raw: Any, index: int = 0) -> PackageEntry:
    where = f"packages[{index}]"
    if not isinstance(raw, dict):
        raise DecodeError(f"{where} must be a mapping, got {type(raw).__name__}")

    names_raw = raw.get("names")
    if names_raw is None:
        names: Tuple[str, ...] = ()
    elif isinstance(names_raw, list) and all(isinstance(n, str) for n in names_raw):
        # Surrounding whitespace is trimmed; blank names are dropped.
        names = tuple(n.strip() for n in names_raw if n.strip())
    else:
        raise DecodeError(f"{where}: names must be a list of strings")

    elevated = raw.get("elevated", False)
    if elevated is None:
        elevated = False
    if not isinstance(elevated, bool):
        raise DecodeError(f"{where}: elevated must be a boolean")

    return PackageEntry(
        name=_opt_str(raw, "name", where),
        names=names,
        package_manager=_opt_str(raw, "packageManager", where),
        action=_opt_str(raw, "action", where),
        elevated=elevated,
    )


def parse_packages(doc: Any) -> PackagesData:
    if not isinstance(doc, dict):
        raise DecodeError(f"package blueprint root must be a mapping, got {type(doc).__name__}")

    raw = doc.get("packages")
    if raw is None:
        return PackagesData()
    if not isinstance(raw, list):
        raise DecodeError("packages must be a list")

    return PackagesData(packages=tuple(parse_package_entry(p, i) for i, p in enumerate(raw)))


def decode_packages(data: bytes | str, format_hint: Optional[str]) -> List[PackageEntry]:
    """Decode a package blueprint; format_hint is an extension or a format name."""

    if not format_hint:
        raise DecodeError("no format given for package blueprint data")
    return list(parse_packages(decode_bytes(data, format_hint)).packages)
