from __future__ import annotations

import pytest

from node_packager.config import PackagingRequest, build_request, env_defaults, load_config_file
from node_packager.errors import InvalidInput
from node_packager.lib.npm import DEFAULT_REGISTRY


@pytest.mark.parametrize(
    "identifier, name, prefix",
    [
        ("node-red-contrib-data-view", "node-red-contrib-data-view", "node-red-contrib-data-view"),
        ("node-red-contrib-data-view@0.0.3", "node-red-contrib-data-view", "node-red-contrib-data-view"),
        ("@flowfuse/node-red-dashboard", "@flowfuse/node-red-dashboard", "flowfuse-node-red-dashboard"),
        ("@flowfuse/node-red-dashboard@1.16.0", "@flowfuse/node-red-dashboard", "flowfuse-node-red-dashboard"),
    ],
)
def test_derived_names(identifier, name, prefix):
    req = PackagingRequest(library_name=identifier)

    assert req.library_name_without_version == name
    assert req.tarball_prefix == prefix


def test_defaults():
    req = PackagingRequest(library_name="lib", registry="", audit_level="", proxy="")

    assert req.registry == DEFAULT_REGISTRY
    assert req.audit_level == "high"
    assert req.proxy is None
    assert not req.has_src_dir


def test_validate_rejects_blank_identifier():
    with pytest.raises(InvalidInput):
        PackagingRequest(library_name="").validate()


def test_validate_rejects_unknown_audit_level():
    with pytest.raises(InvalidInput, match="invalid audit level"):
        PackagingRequest(library_name="lib", audit_level="severe").validate()


def test_validate_accepts_existing_src_dir(tmp_path):
    req = PackagingRequest(library_name="lib", src_dir=str(tmp_path))

    assert req.validate() is req


def test_env_defaults():
    env = {"NODE_PACKAGER_REGISTRY": "https://npm.example.com", "HTTPS_PROXY": "http://proxy:3128"}

    assert env_defaults(env) == {"registry": "https://npm.example.com", "proxy": "http://proxy:3128"}
    assert env_defaults({}) == {}


def test_config_file_and_overrides(tmp_path):
    cfg = tmp_path / "node-packager.yaml"
    cfg.write_text(
        "registry: https://npm.internal\naudit-level: critical\nkeep_tmp: true\nsrc: /opt/lib\n",
        encoding="utf-8",
    )

    req = build_request(
        "lib",
        overrides={"audit_level": "low", "keep_tmp": None, "verbose": True},
        config_path=str(cfg),
        environ={"NODE_PACKAGER_REGISTRY": "https://from-env", "NODE_PACKAGER_PROXY": "http://p"},
    )

    assert req.registry == "https://npm.internal"
    assert req.proxy == "http://p"
    assert req.audit_level == "low"
    assert req.keep_tmp is True
    assert req.verbose is True
    assert req.src_dir == "/opt/lib"


def test_config_file_may_name_the_library(tmp_path):
    cfg = tmp_path / "cfg.yml"
    cfg.write_text("library: node-red-contrib-opcua\n", encoding="utf-8")

    assert build_request("", config_path=str(cfg), environ={}).library_name == "node-red-contrib-opcua"


def test_config_file_rejects_unknown_keys(tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("colour: blue\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown config key"):
        load_config_file(str(cfg))


def test_config_file_must_be_yaml(tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="must be YAML"):
        load_config_file(str(cfg))


def test_config_file_with_broken_yaml(tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("registry: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="invalid YAML"):
        load_config_file(str(cfg))


def test_config_file_rejects_non_numeric_retries(tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("audit-retries: 'two'\n", encoding="utf-8")

    with pytest.raises(InvalidInput, match="audit_retries"):
        build_request("lib", config_path=str(cfg), environ={})


@pytest.mark.parametrize("text, expected", [("'false'", False), ("'yes'", True), ("off", False), ("1", True)])
def test_config_file_quoted_booleans(tmp_path, text, expected):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(f"keep-tmp: {text}\n", encoding="utf-8")

    assert build_request("lib", config_path=str(cfg), environ={}).keep_tmp is expected


def test_config_file_string_values(tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("audit-retries: '2'\nverbose: maybe\n", encoding="utf-8")

    with pytest.raises(InvalidInput, match="verbose must be true or false"):
        build_request("lib", config_path=str(cfg), environ={})
    cfg.write_text("audit-retries: '2'\n", encoding="utf-8")
    assert build_request("lib", config_path=str(cfg), environ={}).audit_retries == 2
