"""Shared fixtures.

No test touches the network or a real package manager: command execution is
replaced by FakeExecutor and git by a fake run_cmd.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from blueprint_runner.context import RunContext
from blueprint_runner.errors import ExecutionError
from blueprint_runner.init_config import InitConfig
from blueprint_runner.lib.command import Command
from blueprint_runner.lib.osdetect import OSInfo
from blueprint_runner.managers import ManagerRegistry


class FakeExecutor:
    """Records every Command; units listed in `fail` raise ExecutionError."""

    def __init__(self) -> None:
        self.calls: list[Command] = []
        self.fail: set[str] = set()

    def __call__(self, cmd: Command, debug: bool = False, *, dry_run: bool = False, timeout_s=None):
        self.calls.append(cmd)
        unit = cmd.args[0] if cmd.args else cmd.exec
        if unit in self.fail:
            raise ExecutionError(unit, f"exit status 100 for {unit}")

    @property
    def names(self) -> list[str]:
        return [c.args[0] for c in self.calls]


@pytest.fixture
def fake_exec(monkeypatch) -> FakeExecutor:
    fx = FakeExecutor()
    monkeypatch.setattr("blueprint_runner.processors.packages.execute_command", fx)
    return fx


@pytest.fixture
def debian_os() -> OSInfo:
    return OSInfo(os="linux", distro="debian", default_manager="apt")


@pytest.fixture
def make_ctx(tmp_path, debian_os):
    def _make(
        init_config: Optional[InitConfig] = None,
        os_info: Optional[OSInfo] = None,
        root: Optional[Path] = None,
    ) -> RunContext:
        info = os_info or debian_os
        return RunContext(
            root=root or tmp_path,
            init_config=init_config or InitConfig(format="yaml"),
            os_info=info,
            registry=ManagerRegistry.from_os_info(info),
        )

    return _make


@pytest.fixture
def write(tmp_path):
    def _write(rel: str, text: str) -> Path:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p

    return _write
