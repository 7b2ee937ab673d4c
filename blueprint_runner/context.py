from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .init_config import InitConfig
from .lib.osdetect import OSInfo
from .managers import ManagerRegistry


@dataclass(frozen=True)
class RunContext:
    """Everything one run needs, built once and passed explicitly."""

    root: Path
    init_config: InitConfig
    os_info: OSInfo
    registry: ManagerRegistry
    debug: bool = False
    dry_run: bool = False
    timeout_s: Optional[float] = None

    def category_dir(self, category: str) -> Path:
        return self.root / category
