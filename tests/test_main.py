from __future__ import annotations

import pytest

import node_packager.main as main_mod
from node_packager import __version__
from node_packager.packager import NodePackager


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # Root handlers would outlive capsys' streams.
    monkeypatch.setattr(main_mod, "configure_logging", lambda **kwargs: None)


def test_version(capsys):
    assert main_mod.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == __version__


def test_missing_library_prints_usage_and_error(workdir, capsys):
    assert main_mod.main([]) == 1

    captured = capsys.readouterr()
    assert "usage: node-packager" in captured.out
    assert "ERROR: library not defined" in captured.err


def test_cli_runs_packager(workdir, fake_npm, monkeypatch, capsys):
    seen = {}

    def fake_run(request, *, packager=None):
        seen["request"] = request
        return NodePackager(driver=fake_npm).pack(request)

    monkeypatch.setattr(main_mod, "run", fake_run)

    rc = main_mod.main(["--no-audit", "--keep-tmp", "--audit-level", "critical", "node-red-contrib-data-view"])

    assert rc == 0
    req = seen["request"]
    assert req.library_name == "node-red-contrib-data-view"
    assert req.no_audit and req.keep_tmp and not req.audit_fix
    assert req.audit_level == "critical"
    assert (workdir / "node-red-contrib-data-view-1.2.3.tgz").is_file()
    assert "successfully packed" in capsys.readouterr().out


def test_help_prints_banner_before_usage(capsys):
    assert main_mod.main(["--help"]) == 0

    out = capsys.readouterr().out
    assert out.index(main_mod.NAME) < out.index("usage: node-packager")


@pytest.mark.parametrize(
    "content, message",
    [
        ("registry: [unclosed\n", "invalid YAML"),
        ("audit-retries: 'two'\n", "audit_retries must be a whole number"),
    ],
)
def test_bad_config_file_prints_usage_and_error(workdir, capsys, content, message):
    cfg = workdir / "node-packager.yaml"
    cfg.write_text(content, encoding="utf-8")

    assert main_mod.main(["--config", str(cfg), "lib"]) == 1

    captured = capsys.readouterr()
    assert "usage: node-packager" in captured.out
    assert f"ERROR: {message}" in captured.err
