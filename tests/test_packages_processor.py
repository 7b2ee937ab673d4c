from __future__ import annotations

import json
import logging

import pytest

from blueprint_runner.blueprints import PackageEntry
from blueprint_runner.errors import DecodeError
from blueprint_runner.init_config import InitConfig
from blueprint_runner.lib.osdetect import OSInfo
from blueprint_runner.managers import MANAGER_TEMPLATES
from blueprint_runner.processors.packages import (
    PackagesProcessor,
    build_command,
    process_packages,
    process_packages_from_data,
    process_packages_from_file,
)


def test_names_expand_into_independent_attempts(make_ctx, fake_exec):
    fake_exec.fail.add("x")
    entry = PackageEntry(names=("x", "y"), action="install", package_manager="apt")

    report = process_packages([entry], make_ctx())

    assert fake_exec.names == ["x", "y"]
    assert all(c.exec == MANAGER_TEMPLATES["apt"].install for c in fake_exec.calls)
    assert [u for u, _ in report] == ["x"]


def test_names_take_precedence_over_name(make_ctx, fake_exec):
    entry = PackageEntry(name="ignored", names=("a", "b"), action="install")
    process_packages([entry], make_ctx())
    assert fake_exec.names == ["a", "b"]


def test_single_name_is_one_unit(make_ctx, fake_exec):
    process_packages([PackageEntry(name="git", action="install")], make_ctx())
    assert fake_exec.names == ["git"]
    assert fake_exec.calls[0].exec == MANAGER_TEMPLATES["apt"].install


def test_remove_uses_remove_template(make_ctx, fake_exec):
    process_packages([PackageEntry(name="nano", action="remove", package_manager="dnf")], make_ctx())
    assert fake_exec.calls[0].exec == MANAGER_TEMPLATES["dnf"].remove


def test_unit_can_raise_but_not_lower_elevation(make_ctx):
    ctx = make_ctx()
    raised = build_command(PackageEntry(name="wget", action="install", package_manager="brew", elevated=True), ctx)
    kept = build_command(PackageEntry(name="wget", action="install", package_manager="apt", elevated=False), ctx)
    plain = build_command(PackageEntry(name="wget", action="install", package_manager="brew"), ctx)
    assert raised.elevated is True
    assert kept.elevated is True
    assert plain.elevated is False


def test_unsupported_action_is_recorded_and_siblings_run(make_ctx, fake_exec):
    entries = [
        PackageEntry(name="a", action="upgrade"),
        PackageEntry(name="b", action="install"),
    ]
    report = process_packages(entries, make_ctx())
    assert fake_exec.names == ["b"]
    assert report.lines() == ["a: unsupported action: upgrade"]


def test_unknown_manager_is_recorded_and_siblings_run(make_ctx, fake_exec):
    entries = [
        PackageEntry(names=("a", "b"), action="install", package_manager="unknown-xyz"),
        PackageEntry(name="c", action="install"),
    ]
    report = process_packages(entries, make_ctx())
    assert fake_exec.names == ["c"]
    assert [u for u, _ in report] == ["a", "b"]
    assert "unsupported package manager: unknown-xyz" in report.lines()[0]


def test_yay_installs_with_default_manager(make_ctx, fake_exec):
    arch = OSInfo(os="linux", distro="arch", default_manager="pacman")
    process_packages([PackageEntry(name="spotify", action="install", package_manager="yay")], make_ctx(os_info=arch))
    assert fake_exec.calls[0].exec == MANAGER_TEMPLATES["pacman"].install


def test_install_only_blueprint_is_idempotent(make_ctx, fake_exec):
    entries = [PackageEntry(names=("git", "curl"), action="install")]
    ctx = make_ctx()
    first = process_packages(entries, ctx)
    second = process_packages(entries, ctx)
    assert not first and not second
    assert fake_exec.names == ["git", "curl", "git", "curl"]


def test_failures_are_logged_as_warning_summary(make_ctx, fake_exec, caplog):
    fake_exec.fail.add("bad")
    with caplog.at_level(logging.WARNING, logger="blueprint_runner.report"):
        process_packages([PackageEntry(names=("bad", "good"), action="install")], make_ctx())
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert messages[0].startswith("Failed to process")
    assert messages[1] == "bad: exit status 100 for bad"


@pytest.mark.parametrize(
    "name, text",
    [
        ("base.yaml", "packages:\n  - names: [git, curl]\n    action: install\n"),
        ("base.json", json.dumps({"packages": [{"names": ["git", "curl"], "action": "install"}]})),
        ("base.toml", '[[packages]]\nnames = ["git", "curl"]\naction = "install"\n'),
    ],
)
def test_process_from_file_in_every_format(make_ctx, fake_exec, write, name, text):
    path = write(f"packages/{name}", text)
    report = process_packages_from_file(path, make_ctx())
    assert not report
    assert fake_exec.names == ["git", "curl"]


def test_process_from_file_decode_error(make_ctx, fake_exec, write):
    path = write("packages/broken.yaml", "packages: [unclosed\n")
    with pytest.raises(DecodeError):
        process_packages_from_file(path, make_ctx())
    assert fake_exec.calls == []


def test_process_from_missing_file_is_decode_error(make_ctx, tmp_path):
    with pytest.raises(DecodeError):
        process_packages_from_file(tmp_path / "missing.yaml", make_ctx())


def test_process_from_data_uses_init_format(make_ctx, fake_exec):
    ctx = make_ctx(init_config=InitConfig(format="json"))
    data = json.dumps({"packages": [{"name": "jq", "action": "install", "packageManager": "nix"}]}).encode()
    process_packages_from_data(data, ctx)
    assert fake_exec.calls[0].exec == MANAGER_TEMPLATES["nix"].install


def test_process_from_data_without_format_is_decode_error(make_ctx):
    with pytest.raises(DecodeError):
        process_packages_from_data(b"packages: []", make_ctx(init_config=InitConfig()))


def test_processor_runs_inline_init_packages(make_ctx, fake_exec):
    cfg = InitConfig(format="yaml", packages=(PackageEntry(name="vim", action="install"),))
    report = PackagesProcessor().run_inline(make_ctx(init_config=cfg))
    assert not report
    assert fake_exec.names == ["vim"]
