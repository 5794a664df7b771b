from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Loading of the optional JSON configuration file.
3. Resilience against corrupted config files.
4. Derivation rules of the immutable DeployConfig.
"""

import json
import os
from pathlib import Path

import pytest

from hdeploy.domain.config import (
    DeployConfig,
    get_default_config,
    load_config,
    save_config,
)
from hdeploy.domain.constants import CURRENT_CONFIG_VERSION
from hdeploy.domain.errors import ConfigurationError, ErrorKind


def test_default_config_has_empty_paths() -> None:
    cfg = get_default_config()

    for key in ("runtime_home", "runtime_library_dir", "compiled_output_dir", "output_dir"):
        assert cfg[key] == ""
    assert cfg["exclusion_strategy"] == "base-name"


def test_default_config_returns_fresh_lists() -> None:
    first = get_default_config()
    first["library_extensions"].append(".zip")
    assert get_default_config()["library_extensions"] == [".jar"]


# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------

def test_load_without_file_returns_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config() == get_default_config()


def test_load_implicit_file_from_working_directory(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "hdeploy.json").write_text(
        json.dumps({"runtime_home": "/opt/hadoop", "version": "1.0.0"}), encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    cfg = load_config()

    assert cfg["runtime_home"] == "/opt/hadoop"
    assert "version" not in cfg
    assert cfg["exclusion_strategy"] == "base-name"


def test_load_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc:
        load_config(str(tmp_path / "missing.json"))
    assert exc.value.kind == ErrorKind.CONFIGURATION


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_load_corrupted_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "hdeploy.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_save_and_reload(tmp_path: Path) -> None:
    path = tmp_path / "conf" / "hdeploy.json"
    cfg = get_default_config()
    cfg["runtime_home"] = "/opt/hadoop"

    save_config(cfg, str(path))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["version"] == CURRENT_CONFIG_VERSION
    assert load_config(str(path)) == cfg


# -----------------------------------------------------------------------------
# DeployConfig
# -----------------------------------------------------------------------------

def test_runtime_library_dir_derived_from_home() -> None:
    cfg = DeployConfig.from_dict({"runtime_home": "/opt/hadoop", "compiled_output_dir": "/p/classes"})
    assert cfg.runtime_library_dir == os.path.join("/opt/hadoop", "lib")


def test_explicit_runtime_library_dir_wins() -> None:
    cfg = DeployConfig.from_dict({"runtime_home": "/opt/hadoop", "runtime_library_dir": "/usr/lib/hadoop"})
    assert cfg.runtime_library_dir == "/usr/lib/hadoop"


def test_output_dir_derived_from_build_directory() -> None:
    cfg = DeployConfig.from_dict({"build_directory": "/p/target"})
    assert cfg.output_dir == os.path.join("/p/target", "hadoop-deploy")


def test_output_dir_defaults_under_working_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    cfg = DeployConfig.from_dict({})

    assert cfg.output_dir == os.path.join(os.getcwd(), "target", "hadoop-deploy")
    assert cfg.project_identifier == "project"
    assert cfg.runtime_library_dir == ""


def test_deploy_config_is_immutable() -> None:
    cfg = DeployConfig.from_dict({})
    with pytest.raises(AttributeError):
        cfg.output_dir = "/elsewhere"  # type: ignore[misc]


def test_to_dict_uses_lists() -> None:
    cfg = DeployConfig.from_dict({"library_packaging_types": ["jar", "bundle"]})
    data = cfg.to_dict()

    assert data["library_packaging_types"] == ["jar", "bundle"]
    assert data["library_extensions"] == [".jar"]
    json.dumps(data)
