from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .blueprints import PackageEntry, parse_package_entry
from .errors import DecodeError, InitConfigError
from .lib.formats import format_for_path, load_file
from .run_order import FileOrderEntry, parse_file_order

logger = logging.getLogger(__name__)

# Top-level record lists; only `packages` is typed, the others belong to
# processors that live outside this package.
RECORD_SECTIONS = (
    "packageManagers",
    "repositories",
    "services",
    "files",
    "directories",
    "templates",
    "configuration",
)


@dataclass(frozen=True)
class InitConfig:
    path: Optional[Path] = None
    format: str = ""
    order: Optional[Tuple[str, ...]] = None
    file_orders: Mapping[str, Tuple[FileOrderEntry, ...]] = field(default_factory=dict)
    packages: Tuple[PackageEntry, ...] = ()
    records: Mapping[str, Tuple[Dict[str, Any], ...]] = field(default_factory=dict)
    variables: Mapping[str, Any] = field(default_factory=dict)

    def file_order_for(self, category: str) -> Optional[List[FileOrderEntry]]:
        if category not in self.file_orders:
            return None
        return list(self.file_orders[category])

    def section(self, name: str) -> Tuple[Dict[str, Any], ...]:
        return self.records.get(name, ())


def _blueprint_section(raw: Dict[str, Any]) -> Dict[str, Any]:
    section = raw.get("blueprint")
    if section is None:
        section = raw.get("blueprints")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InitConfigError("blueprint section must be a mapping")
    return section


def _parse_order(section: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
    order = section.get("order")
    if order is None:
        return None
    if not isinstance(order, list) or not all(isinstance(c, str) for c in order):
        raise InitConfigError("blueprint.order must be a list of category names")
    return tuple(order)


def _parse_file_orders(section: Dict[str, Any]) -> Dict[str, Tuple[FileOrderEntry, ...]]:
    files = section.get("files")
    if files is None:
        return {}
    if not isinstance(files, dict):
        raise InitConfigError("blueprint.files must map category names to file lists")
    return {str(cat): tuple(parse_file_order(entries)) for cat, entries in files.items()}


def _parse_records(raw: Dict[str, Any], key: str) -> Tuple[Dict[str, Any], ...]:
    items = raw.get(key)
    if items is None:
        return ()
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise InitConfigError(f"{key} must be a list of mappings")
    return tuple(items)


def parse_init_config(raw: Any, *, path: Optional[Path] = None) -> InitConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InitConfigError(f"init descriptor must contain a mapping/object, got {type(raw).__name__}")

    section = _blueprint_section(raw)

    fmt = section.get("format") or ""
    if not isinstance(fmt, str):
        raise InitConfigError("blueprint.format must be a string")
    if not fmt and path is not None:
        fmt = format_for_path(path)

    packages_raw = raw.get("packages")
    if packages_raw is not None and not isinstance(packages_raw, list):
        raise InitConfigError("packages must be a list")
    try:
        packages = tuple(parse_package_entry(p, i) for i, p in enumerate(packages_raw or []))
    except DecodeError as e:
        raise InitConfigError(f"init packages: {e}") from e

    variables = raw.get("variables") or {}
    if not isinstance(variables, dict):
        raise InitConfigError("variables must be a mapping")

    return InitConfig(
        path=path,
        format=fmt,
        order=_parse_order(section),
        file_orders=_parse_file_orders(section),
        packages=packages,
        records={k: _parse_records(raw, k) for k in RECORD_SECTIONS},
        variables=variables,
    )


def load_init_config(path: Path) -> InitConfig:
    try:
        raw = load_file(path)
    except DecodeError as e:
        raise InitConfigError(f"cannot load init descriptor {path}: {e}") from e

    cfg = parse_init_config(raw, path=path)
    logger.info(
        "Init descriptor %s (format=%s order=%s)",
        path,
        cfg.format,
        ",".join(cfg.order) if cfg.order is not None else "default",
    )
    return cfg
