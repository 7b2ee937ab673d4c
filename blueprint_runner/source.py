from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import MissingInitError, SourceFetchError, SourceSyncError
from .lib import git

logger = logging.getLogger(__name__)

# Probe order is fixed: only the first existing descriptor is ever read.
INIT_FILE_NAMES = ("init.yaml", "init.json", "init.toml")


@dataclass(frozen=True)
class BlueprintSource:
    local_path: str
    remote_store_type: str = "none"
    remote_store_url: str = ""

    @property
    def is_git(self) -> bool:
        return self.remote_store_type == "git"


def find_init_file(directory: Path) -> Path:
    for name in INIT_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    raise MissingInitError(f"init file not found in the blueprints location: {directory}")


def _clone(source: BlueprintSource) -> None:
    if not source.remote_store_url:
        raise SourceFetchError("remote store type is git but no remoteStoreURL is configured")
    try:
        git.clone(source.remote_store_url, source.local_path)
    except git.GitError as e:
        logger.error("Error cloning Git repository: %s", e)
        raise SourceFetchError(f"error cloning Git repository: {e}") from e
    logger.info("Git repository cloned to: %s", source.local_path)


def _pull(source: BlueprintSource) -> None:
    try:
        git.open_repo(source.local_path)
    except git.GitError as e:
        logger.error("Error opening Git repository: %s", e)
        raise SourceSyncError(f"error opening Git repository: {e}") from e

    try:
        changed = git.pull(source.local_path)
    except git.GitError as e:
        logger.error("Error pulling changes from Git repository: %s", e)
        raise SourceSyncError(f"error pulling changes from Git repository: {e}") from e

    if changed:
        logger.info("Git repository updated: %s", source.local_path)
    else:
        logger.info("Git repository already up to date: %s", source.local_path)


def get_blueprints_location(source: BlueprintSource, update: bool = False) -> Path:
    """Resolve (and clone/pull if needed) the local blueprint directory."""

    local = Path(source.local_path)

    if source.is_git:
        if not local.exists():
            _clone(source)
        elif update:
            _pull(source)

    init_file = find_init_file(local)
    logger.info("Using init file: %s", init_file)
    return local
