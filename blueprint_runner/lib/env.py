from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    config_default: str = "~/.config/blueprint-runner/config.yaml"
    blueprints_default: str = "~/.config/blueprint-runner/blueprints"
    log_default: str = "~/.cache/blueprint-runner/run.log"


PATHS = Paths()
