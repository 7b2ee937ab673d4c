from __future__ import annotations

from pathlib import Path

import pytest

from blueprint_runner.blueprints import PackageEntry
from blueprint_runner.errors import DecodeError
from blueprint_runner.init_config import InitConfig, parse_init_config
from blueprint_runner.pipeline import run_blueprints
from blueprint_runner.processors import PackagesProcessor
from blueprint_runner.report import FailureReport


class RecordingProcessor:
    def __init__(self, category: str, seen: list) -> None:
        self.category = category
        self.seen = seen

    def run_inline(self, ctx):
        self.seen.append((self.category, "<inline>"))
        return FailureReport()

    def run_file(self, path: Path, ctx):
        self.seen.append((self.category, path.relative_to(ctx.root).as_posix()))
        return FailureReport()


def _pkgs(*names: str) -> str:
    return "packages:\n  - names: [" + ", ".join(names) + "]\n    action: install\n"


def test_default_order_runs_packages_and_skips_unregistered(make_ctx, fake_exec, write):
    write("packages/b.yaml", _pkgs("b1"))
    write("packages/a.yaml", _pkgs("a1", "a2"))

    result = run_blueprints(make_ctx())

    assert fake_exec.names == ["a1", "a2", "b1"]
    assert result.ran_categories == ["packages"]
    assert result.skipped_categories == ["repositories", "files", "services"]
    assert result.ok


def test_declared_file_order_and_groups(make_ctx, fake_exec, write):
    write("packages/z.yaml", _pkgs("z"))
    write("packages/dev/python.yaml", _pkgs("python3"))
    write("packages/dev/rust.yaml", _pkgs("rustup"))
    write("packages/ignored.yaml", _pkgs("never"))
    cfg = parse_init_config(
        {"blueprint": {"order": ["packages"], "files": {"packages": ["z.yaml", {"dev": ["rust.yaml", "python.yaml"]}]}}}
    )

    run_blueprints(make_ctx(init_config=cfg))

    assert fake_exec.names == ["z", "rustup", "python3"]


def test_inline_packages_run_before_category_files(make_ctx, fake_exec, write):
    write("packages/a.yaml", _pkgs("from-file"))
    cfg = InitConfig(format="yaml", packages=(PackageEntry(name="inline", action="install"),))
    run_blueprints(make_ctx(init_config=cfg))
    assert fake_exec.names == ["inline", "from-file"]


def test_unit_failures_do_not_fail_the_run(make_ctx, fake_exec, write):
    fake_exec.fail.add("bad")
    write("packages/a.yaml", _pkgs("bad", "good"))
    write("packages/b.yaml", _pkgs("later"))

    result = run_blueprints(make_ctx())

    assert fake_exec.names == ["bad", "good", "later"]
    assert result.ran_categories == ["packages"]
    assert result.report.lines() == ["bad: exit status 100 for bad"]
    assert not result.ok


def test_decode_error_stops_the_run_by_default(make_ctx, fake_exec, write):
    write("packages/a.yaml", "packages: [oops\n")
    write("packages/b.yaml", _pkgs("b"))
    with pytest.raises(DecodeError):
        run_blueprints(make_ctx())
    assert fake_exec.calls == []


def test_keep_going_skips_undecodable_files(make_ctx, fake_exec, write):
    write("packages/a.yaml", "packages: [oops\n")
    write("packages/b.yaml", _pkgs("b"))

    result = run_blueprints(make_ctx(), keep_going=True)

    assert fake_exec.names == ["b"]
    assert [Path(p).name for p, _ in result.file_failures] == ["a.yaml"]


def test_categories_and_files_follow_resolved_order(make_ctx, write):
    write("services/s.yaml", "")
    write("files/f2.yaml", "")
    write("files/f1.yaml", "")
    seen: list = []
    procs = {c: RecordingProcessor(c, seen) for c in ("files", "services")}
    cfg = InitConfig(order=("services", "files"))

    result = run_blueprints(make_ctx(init_config=cfg), processors=procs)

    assert seen == [
        ("services", "<inline>"),
        ("services", "services/s.yaml"),
        ("files", "<inline>"),
        ("files", "files/f1.yaml"),
        ("files", "files/f2.yaml"),
    ]
    assert result.ran_categories == ["services", "files"]


def test_only_filter_restricts_categories(make_ctx, write):
    seen: list = []
    procs = {c: RecordingProcessor(c, seen) for c in ("files", "services")}
    result = run_blueprints(make_ctx(), processors=procs, only={"services"})
    assert seen == [("services", "<inline>")]
    assert result.skipped_categories == ["repositories", "packages", "files"]


def test_packages_processor_is_registered_by_default():
    from blueprint_runner.processors import default_processors

    assert isinstance(default_processors()["packages"], PackagesProcessor)
