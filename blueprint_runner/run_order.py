"""Category and file run order.

Both resolvers are pass-through: declared orders are returned as written, with
no validation or de-duplication. Malformed file-order elements are dropped
without error.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple, Union

if TYPE_CHECKING:
    from .init_config import InitConfig

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_ORDER: Tuple[str, ...] = ("repositories", "packages", "files", "services")

BLUEPRINT_SUFFIXES = (".yaml", ".yml", ".json", ".toml")


@dataclass(frozen=True)
class BareFile:
    name: str


@dataclass(frozen=True)
class FileGroup:
    group: str
    names: Tuple[str, ...]


FileOrderEntry = Union[BareFile, FileGroup]


def resolve_category_order(init_config: "InitConfig") -> List[str]:
    if init_config.order is None:
        return list(DEFAULT_CATEGORY_ORDER)
    return list(init_config.order)


def parse_file_order(raw: Any) -> List[FileOrderEntry]:
    """Turn loosely typed config data into BareFile / FileGroup entries."""

    if not isinstance(raw, (list, tuple)):
        return []

    entries: List[FileOrderEntry] = []
    for item in raw:
        if isinstance(item, (BareFile, FileGroup)):
            entries.append(item)
        elif isinstance(item, str):
            entries.append(BareFile(item))
        elif isinstance(item, dict):
            for group, files in item.items():
                if not isinstance(group, str) or not isinstance(files, (list, tuple)):
                    continue
                entries.append(FileGroup(group, tuple(f for f in files if isinstance(f, str))))
        else:
            logger.debug("Ignoring file order element %r", item)
    return entries


def expand_file_order(entries: Iterable[FileOrderEntry]) -> List[str]:
    out: List[str] = []
    for e in entries:
        if isinstance(e, BareFile):
            out.append(e.name)
        else:
            out.extend(posixpath.join(e.group, name) for name in e.names)
    return out


def resolve_file_order(category_dir: Union[str, Path], order_spec: Sequence[Any]) -> List[str]:
    """Ordered relative file paths for one category.

    category_dir is accepted for symmetry with list_category_files; the
    declared order is not checked against the directory contents.
    """

    return expand_file_order(parse_file_order(order_spec))


def list_category_files(category_dir: Union[str, Path], order_spec: Optional[Sequence[Any]]) -> List[str]:
    """Declared file order if there is one, otherwise every blueprint file in the directory."""

    if order_spec is not None:
        return resolve_file_order(category_dir, order_spec)

    d = Path(category_dir)
    if not d.is_dir():
        return []
    return sorted(p.name for p in d.iterdir() if p.is_file() and p.suffix.lower() in BLUEPRINT_SUFFIXES)
