from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class FailureReport:
    """Ordered (unit, error) pairs collected during a run. Never aborts anything."""

    failures: List[Tuple[str, str]] = field(default_factory=list)

    def add(self, unit: str, error: object) -> None:
        self.failures.append((unit, str(error)))

    def extend(self, other: "FailureReport") -> None:
        self.failures.extend(other.failures)

    def lines(self) -> List[str]:
        return [f"{unit}: {err}" for unit, err in self.failures]

    def __bool__(self) -> bool:
        return bool(self.failures)

    def __len__(self) -> int:
        return len(self.failures)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.failures)

    def log_summary(self, header: str = "Failed to process the following packages:") -> None:
        if not self.failures:
            return
        logger.warning(header)
        for line in self.lines():
            logger.warning(line)
