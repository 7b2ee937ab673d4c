from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from ..errors import ExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class Command:
    """A fully resolved unit of execution: template + args + elevation."""

    exec: str
    args: List[str] = field(default_factory=list)
    elevated: bool = False


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    dry_run: bool = False,
    timeout_s: float | None = None,
    echo: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - stdout/stderr go to DEBUG, or INFO when echo is set.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        encoding="utf-8",
        errors="replace",
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
        timeout=timeout_s,
    )

    out_level = logging.INFO if echo else logging.DEBUG
    if p.stdout:
        logger.log(out_level, "STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.log(out_level, "STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise RuntimeError(f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}")

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def _needs_sudo() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is None or geteuid() != 0


def build_argv(cmd: Command) -> list[str]:
    argv = [*shlex.split(cmd.exec), *cmd.args]
    if not argv:
        raise ValueError("empty command")
    if cmd.elevated and _needs_sudo():
        argv = ["sudo", *argv]
    return argv


def execute_command(
    cmd: Command,
    debug: bool = False,
    *,
    dry_run: bool = False,
    timeout_s: float | None = None,
) -> CmdResult:
    """Execute a resolved Command; any failure surfaces as ExecutionError."""

    unit = " ".join(cmd.args) or cmd.exec
    try:
        argv = build_argv(cmd)
    except ValueError as e:
        raise ExecutionError(unit, f"invalid command template {cmd.exec!r}: {e}") from e

    try:
        return run_cmd(argv, dry_run=dry_run, timeout_s=timeout_s, echo=debug)
    except FileNotFoundError as e:
        raise ExecutionError(unit, f"executable not found: {argv[0]}") from e
    except OSError as e:
        raise ExecutionError(unit, f"cannot execute {argv[0]}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExecutionError(unit, f"timed out after {e.timeout}s: {_fmt_argv(argv)}") from e
    except RuntimeError as e:
        raise ExecutionError(unit, str(e).strip()) from e
    except Exception as e:
        raise ExecutionError(unit, f"cannot run {_fmt_argv(argv)}: {e}") from e
