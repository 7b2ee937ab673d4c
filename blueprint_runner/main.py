from __future__ import annotations

import argparse
import logging
from typing import Callable, Optional, Sequence

from .context import RunContext
from .errors import BlueprintError, InitConfigError
from .init_config import load_init_config
from .lib.env import PATHS
from .lib.osdetect import OSInfo, detect_os
from .logging_utils import configure_logging
from .managers import ManagerRegistry
from .pipeline import PipelineResult, run_blueprints
from .settings import load_runner_config
from .source import find_init_file, get_blueprints_location

logger = logging.getLogger(__name__)


def run(
    *,
    config_path: Optional[str] = PATHS.config_default,
    blueprints: Optional[str] = None,
    remote_url: Optional[str] = None,
    update: bool = False,
    log_path: Optional[str] = None,
    log_level: Optional[str] = None,
    debug: bool = False,
    dry_run: bool = False,
    keep_going: bool = False,
    categories: Optional[Sequence[str]] = None,
    os_detector: Optional[Callable[[], OSInfo]] = None,
) -> PipelineResult:
    """Resolve the blueprint source and apply it to this machine."""

    cfg = load_runner_config(config_path).with_overrides(local_path=blueprints, remote_url=remote_url)

    level = "DEBUG" if debug else (log_level or cfg.log_level)
    try:
        configure_logging(log_path=log_path or cfg.log_path, level=level)
    except ValueError as e:
        raise InitConfigError(str(e)) from e

    root = get_blueprints_location(cfg.blueprint_source(), update=update)
    init_config = load_init_config(find_init_file(root))

    os_info = (os_detector or detect_os)()
    registry = ManagerRegistry.from_os_info(os_info)
    if cfg.default_package_manager:
        registry = registry.with_default(cfg.default_package_manager)

    ctx = RunContext(
        root=root,
        init_config=init_config,
        os_info=os_info,
        registry=registry,
        debug=debug,
        dry_run=dry_run,
        timeout_s=cfg.command_timeout_s,
    )

    result = run_blueprints(ctx, only=categories, keep_going=keep_going)

    logger.info(
        "Run complete (ran=%s skipped=%s failures=%d)",
        ",".join(result.ran_categories) or "-",
        ",".join(result.skipped_categories) or "-",
        len(result.report) + len(result.file_failures),
    )
    if result.file_failures:
        logger.warning("Blueprint files skipped:")
        for path, err in result.file_failures:
            logger.warning("%s: %s", path, err)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="blueprint-runner")
    p.add_argument("--config", default=PATHS.config_default, help="Runner config (yaml|json|toml)")
    p.add_argument("--blueprints", default=None, help="Override repository.blueprints.localPath")
    p.add_argument("--remote-url", default=None, help="Override repository.blueprints.remoteStoreURL (implies git)")
    p.add_argument("--update", action="store_true", help="Pull the blueprint repository before running")
    p.add_argument("--log", default=None, help="Path to the run log")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    p.add_argument("--debug", action="store_true", help="Debug logging and command output")
    p.add_argument("--dry-run", action="store_true", help="Log commands without executing them")
    p.add_argument("--keep-going", action="store_true", help="Skip blueprint files that fail to decode")
    p.add_argument(
        "--category",
        action="append",
        dest="categories",
        default=None,
        help="Only run this category (repeatable)",
    )

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            blueprints=args.blueprints,
            remote_url=args.remote_url,
            update=bool(args.update),
            log_path=args.log,
            log_level=args.log_level,
            debug=bool(args.debug),
            dry_run=bool(args.dry_run),
            keep_going=bool(args.keep_going),
            categories=args.categories,
        )
    except BlueprintError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
