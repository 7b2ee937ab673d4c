from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import DecodeError, InitConfigError
from .lib.env import PATHS
from .lib.formats import load_file
from .source import BlueprintSource


def _expand(p: str) -> str:
    return os.path.expanduser(os.path.expandvars(p))


@dataclass(frozen=True)
class RunnerConfig:
    raw: Dict[str, Any]

    @property
    def _blueprints(self) -> Dict[str, Any]:
        return ((self.raw.get("repository") or {}).get("blueprints")) or {}

    @property
    def blueprints_local_path(self) -> str:
        return _expand(str(self._blueprints.get("localPath") or PATHS.blueprints_default))

    @property
    def remote_store_type(self) -> str:
        return str(self._blueprints.get("remoteStoreType") or "none").strip().lower()

    @property
    def remote_store_url(self) -> str:
        return str(self._blueprints.get("remoteStoreURL") or "")

    @property
    def log_path(self) -> str:
        return _expand(str(((self.raw.get("log") or {}).get("path")) or PATHS.log_default))

    @property
    def log_level(self) -> str:
        return str(((self.raw.get("log") or {}).get("level")) or "INFO").upper()

    @property
    def default_package_manager(self) -> Optional[str]:
        v = (self.raw.get("packageManager") or {}).get("default")
        return str(v) if v else None

    @property
    def command_timeout_s(self) -> Optional[float]:
        v = (self.raw.get("commands") or {}).get("timeoutSeconds")
        if not v:
            return None
        try:
            return float(v)
        except (TypeError, ValueError) as e:
            raise InitConfigError(f"commands.timeoutSeconds must be a number, got {v!r}") from e

    def blueprint_source(self) -> BlueprintSource:
        return BlueprintSource(
            local_path=self.blueprints_local_path,
            remote_store_type=self.remote_store_type,
            remote_store_url=self.remote_store_url,
        )

    def with_overrides(self, *, local_path: Optional[str] = None, remote_url: Optional[str] = None) -> "RunnerConfig":
        """Copy with CLI overrides applied to repository.blueprints."""

        if local_path is None and remote_url is None:
            return self
        raw = dict(self.raw)
        repo = dict(raw.get("repository") or {})
        bp = dict(repo.get("blueprints") or {})
        if local_path is not None:
            bp["localPath"] = local_path
        if remote_url is not None:
            bp["remoteStoreURL"] = remote_url
            bp["remoteStoreType"] = "git"
        repo["blueprints"] = bp
        raw["repository"] = repo
        return RunnerConfig(raw=raw)


def load_runner_config(path: Optional[str]) -> RunnerConfig:
    """Load the runner config (yaml/json/toml). A missing file means defaults."""

    if not path:
        return RunnerConfig(raw={})

    p = Path(_expand(path))
    if not p.exists():
        return RunnerConfig(raw={})

    try:
        raw = load_file(p)
    except DecodeError as e:
        raise InitConfigError(f"cannot load runner config {p}: {e}") from e

    if not isinstance(raw, dict):
        raise InitConfigError(f"{p} must contain a mapping/object")

    return RunnerConfig(raw=raw)
