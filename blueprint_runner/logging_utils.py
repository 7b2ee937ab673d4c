from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .lib.env import PATHS

DEFAULT_LOG_PATH = os.path.expanduser(PATHS.log_default)
FALLBACK_LOG_NAME = "blueprint-runner.log"

# Full records go to the run log; the terminal only needs level and message.
FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
CONSOLE_FORMAT = logging.Formatter(fmt="%(levelname)s: %(message)s")

# Path of the run log once handlers are installed; None until then.
_active_log_path: Optional[str] = None


def parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def _open_run_log(requested: str) -> tuple[logging.FileHandler, str]:
    path = os.path.expanduser(requested)
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path, encoding="utf-8"), path
    except OSError:
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: Union[int, str] = logging.INFO,
    also_console: bool = True,
) -> str:
    """Install the run log (and a terminal handler) on the root logger.

    Every record lands in the run log. An unwritable log_path degrades to
    ./blueprint-runner.log in the working directory. Handlers are installed
    once; later calls (e.g. a second run() in the same process) only move the
    level.

    Returns the run log path in use.
    """

    global _active_log_path

    root = logging.getLogger()
    root.setLevel(parse_level(level))
    if _active_log_path is not None:
        return _active_log_path

    run_log, used_path = _open_run_log(log_path)
    run_log.setFormatter(FILE_FORMAT)
    root.addHandler(run_log)

    if also_console:
        terminal = logging.StreamHandler()
        terminal.setFormatter(CONSOLE_FORMAT)
        root.addHandler(terminal)

    _active_log_path = used_path
    if used_path != os.path.expanduser(log_path):
        logging.getLogger(__name__).warning("Cannot write run log %s, using %s", log_path, used_path)
    logging.getLogger(__name__).debug("Run log: %s", used_path)
    return used_path
