from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Collection, List, Mapping, Optional, Protocol, Tuple

from .context import RunContext
from .errors import DecodeError
from .processors import default_processors
from .report import FailureReport
from .run_order import list_category_files, resolve_category_order

logger = logging.getLogger(__name__)


class Processor(Protocol):
    """Handles every blueprint file of one category."""

    category: str

    def run_inline(self, ctx: RunContext) -> FailureReport:
        ...

    def run_file(self, path: Path, ctx: RunContext) -> FailureReport:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_categories: List[str]
    skipped_categories: List[str]
    report: FailureReport
    file_failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.report and not self.file_failures


def run_blueprints(
    ctx: RunContext,
    *,
    processors: Optional[Mapping[str, Processor]] = None,
    only: Optional[Collection[str]] = None,
    keep_going: bool = False,
) -> PipelineResult:
    """Run categories in resolved order, files in resolved order.

    Unit failures are collected in the report. A file that cannot be decoded
    stops the run unless keep_going is set.
    """

    procs = default_processors() if processors is None else processors

    ran: List[str] = []
    skipped: List[str] = []
    report = FailureReport()
    file_failures: List[Tuple[str, str]] = []

    for category in resolve_category_order(ctx.init_config):
        if only is not None and category not in only:
            logger.info("Skipping category %s (not selected)", category)
            skipped.append(category)
            continue

        proc = procs.get(category)
        if proc is None:
            logger.info("Skipping category %s (no processor registered)", category)
            skipped.append(category)
            continue

        logger.info("Running category %s", category)
        report.extend(proc.run_inline(ctx))

        category_dir = ctx.category_dir(category)
        order = ctx.init_config.file_order_for(category)
        for rel in list_category_files(category_dir, order):
            path = category_dir / rel
            try:
                report.extend(proc.run_file(path, ctx))
            except DecodeError as e:
                if not keep_going:
                    raise
                logger.error("Skipping blueprint %s: %s", path, e)
                file_failures.append((str(path), str(e)))

        ran.append(category)

    return PipelineResult(
        ran_categories=ran,
        skipped_categories=skipped,
        report=report,
        file_failures=file_failures,
    )
