from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..blueprints import PackageEntry, decode_packages
from ..context import RunContext
from ..errors import DecodeError, UnitError, UnsupportedActionError
from ..lib.command import Command, execute_command
from ..report import FailureReport

logger = logging.getLogger(__name__)


def build_command(pkg: PackageEntry, ctx: RunContext) -> Command:
    pm = ctx.registry.resolve(pkg.package_manager, unit=pkg.name)

    # A unit can raise privileges but never drop the manager's own requirement.
    elevated = pm.elevated or pkg.elevated

    if pkg.action == "install":
        logger.debug("Installing package %s", pkg.name)
        template = pm.install
    elif pkg.action == "remove":
        logger.debug("Removing package %s", pkg.name)
        template = pm.remove
    else:
        raise UnsupportedActionError(pkg.name, f"unsupported action: {pkg.action}")

    return Command(exec=template, args=[pkg.name], elevated=elevated)


def handle_package(pkg: PackageEntry, ctx: RunContext) -> None:
    """Resolve and execute a single unit. Raises UnitError on failure."""

    cmd = build_command(pkg, ctx)
    execute_command(cmd, ctx.debug, dry_run=ctx.dry_run, timeout_s=ctx.timeout_s)


def process_packages(entries: Iterable[PackageEntry], ctx: RunContext) -> FailureReport:
    """Run every unit in declaration order; failures are recorded, never raised."""

    report = FailureReport()
    for entry in entries:
        units = entry.units()
        logger.info("Processing %d package(s)", len(units))
        for unit in units:
            logger.debug(
                "Package %s (manager=%s action=%s elevated=%s)",
                unit.name,
                unit.package_manager or "default",
                unit.action,
                unit.elevated,
            )
            try:
                handle_package(unit, ctx)
            except UnitError as e:
                logger.debug("Package %s failed: %s", unit.name, e)
                report.add(unit.name, e)

    report.log_summary()
    return report


def process_packages_from_file(blueprint_file: Path, ctx: RunContext) -> FailureReport:
    logger.debug("Reading blueprint file %s", blueprint_file)
    try:
        data = Path(blueprint_file).read_bytes()
    except OSError as e:
        raise DecodeError(f"error reading blueprint file {blueprint_file}: {e}") from e

    try:
        entries = decode_packages(data, Path(blueprint_file).suffix)
    except DecodeError as e:
        raise DecodeError(f"error decoding package blueprint {blueprint_file}: {e}") from e

    logger.info("Processing packages from %s", blueprint_file)
    return process_packages(entries, ctx)


def process_packages_from_data(blueprint_data: bytes, ctx: RunContext) -> FailureReport:
    """Process a pre-resolved buffer; its format comes from the init descriptor."""

    try:
        entries = decode_packages(blueprint_data, ctx.init_config.format)
    except DecodeError as e:
        logger.error("Error decoding package blueprint data: %s", e)
        raise DecodeError(f"error decoding package blueprint data: {e}") from e

    logger.debug("Processing %d package entries from data", len(entries))
    return process_packages(entries, ctx)


class PackagesProcessor:
    category = "packages"

    def run_inline(self, ctx: RunContext) -> FailureReport:
        entries = ctx.init_config.packages
        if not entries:
            return FailureReport()
        logger.info("Processing %d package entries from init descriptor", len(entries))
        return process_packages(entries, ctx)

    def run_file(self, path: Path, ctx: RunContext) -> FailureReport:
        return process_packages_from_file(path, ctx)
