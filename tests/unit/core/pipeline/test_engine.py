from __future__ import annotations

"""
Unit tests for the Deployment Packaging Pipeline.

Verifies the end-to-end behavior of 'invoke' on real temporary trees:
staging layout, dependency filtering, archive naming and the mapping of
every failure onto a closed error kind.
"""

import os
import zipfile
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

import pytest

from hdeploy.core.pipeline.engine import archive_path_for, invoke, submission_hint
from hdeploy.core.pipeline.stages.validator import validate_config
from hdeploy.domain.config import DeployConfig
from hdeploy.domain.errors import ErrorKind


@pytest.fixture
def config(deploy_config_dict: Dict[str, Any]) -> DeployConfig:
    return DeployConfig.from_dict(deploy_config_dict)


# -----------------------------------------------------------------------------
# Success path
# -----------------------------------------------------------------------------

def test_invoke_produces_archive(config: DeployConfig, make_artifact) -> None:
    guava = make_artifact("com.google.guava", "guava", "31.1-jre", content=b"guava bytes")
    hadoop = make_artifact("org.apache.hadoop", "hadoop-core", "1.0.0")

    result = invoke(config, [guava, hadoop])

    assert result.ok, result.error
    assert result.error_kind is None
    assert result.archive_path == os.path.join(config.output_dir, "wordcount-hdeploy.jar")
    assert os.path.isfile(result.archive_path)

    with zipfile.ZipFile(result.archive_path) as zf:
        names = zf.namelist()
        assert names[0] == "META-INF/MANIFEST.MF"
        assert "com/example/Job.class" in names
        assert "log4j.properties" in names
        assert "lib/guava-31.1-jre.jar" in names
        assert "lib/hadoop-core-1.0.0.jar" not in names
        assert zf.read("lib/guava-31.1-jre.jar") == b"guava bytes"


def test_invoke_summary(config: DeployConfig, make_artifact) -> None:
    guava = make_artifact("com.google.guava", "guava", "31.1-jre")
    stub = make_artifact("org.mortbay.jetty", "jsp-2.1", "6.1.14")

    result = invoke(config, [guava, stub])

    assert result.summary["retained"] == [str(guava)]
    assert list(result.summary["excluded"]) == [str(stub)]
    assert result.summary["staged_files"] == ["guava-31.1-jre.jar"]
    assert result.summary["exclusion_strategy"] == "base-name"
    assert result.summary["entries"] > 0


def test_empty_group_prefix_from_settings_keeps_reserved_artifacts(
        deploy_config_dict: Dict[str, Any], make_artifact
) -> None:
    custom = make_artifact("org.apache.hadoop", "hadoop-custom", "2.0")
    clean, _ = validate_config({**deploy_config_dict, "reserved_group_prefix": ""})

    result = invoke(DeployConfig.from_dict(clean), [custom])

    assert result.ok, result.error
    assert result.summary["retained"] == [str(custom)]
    assert result.summary["staged_files"] == ["hadoop-custom-2.0.jar"]


def test_staging_layout(config: DeployConfig, make_artifact) -> None:
    lib = make_artifact("com.example", "lib-utils", "2.1")

    result = invoke(config, [lib])

    root = Path(result.staging_root)
    assert root == Path(config.output_dir) / "root"
    assert (root / "com" / "example" / "Job.class").is_file()
    assert (root / "lib" / "lib-utils-2.1.jar").is_file()


def test_previous_staging_is_discarded(config: DeployConfig) -> None:
    stale = Path(config.output_dir) / "root" / "stale.class"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    result = invoke(config, [])

    assert result.ok
    assert not stale.exists()
    with zipfile.ZipFile(result.archive_path) as zf:
        assert "stale.class" not in zf.namelist()


def test_sources_are_left_untouched(config: DeployConfig, compiled_dir: Path, make_artifact) -> None:
    lib = make_artifact("com.example", "lib-utils", "2.1")

    invoke(config, [lib])

    assert (compiled_dir / "com" / "example" / "Job.class").is_file()
    assert os.path.isfile(lib.file)


def test_non_library_and_missing_dependencies_are_skipped(config: DeployConfig, make_artifact, caplog) -> None:
    pom = make_artifact("com.example", "parent", "1.0", packaging_type="pom")
    missing = make_artifact("com.example", "ghost", "1.0", create=False)
    kept = make_artifact("com.example", "real", "1.0")

    with caplog.at_level("WARNING"):
        result = invoke(config, [pom, missing, kept])

    assert result.ok
    assert result.summary["staged_files"] == ["real-1.0.jar"]
    assert "Dependency file not found" in caplog.text
    assert "ghost" in caplog.text


def test_repeated_runs_are_identical(config: DeployConfig, make_artifact) -> None:
    lib = make_artifact("com.example", "lib-utils", "2.1")

    first = invoke(config, [lib])
    with zipfile.ZipFile(first.archive_path) as zf:
        first_names = zf.namelist()

    second = invoke(config, [lib])
    with zipfile.ZipFile(second.archive_path) as zf:
        assert zf.namelist() == first_names


# -----------------------------------------------------------------------------
# Configuration failures (no filesystem mutation)
# -----------------------------------------------------------------------------

def test_missing_runtime_library_dir_fails_before_staging(config: DeployConfig) -> None:
    marker = Path(config.output_dir) / "marker.txt"
    marker.parent.mkdir(parents=True)
    marker.write_text("keep me", encoding="utf-8")

    result = invoke(replace(config, runtime_library_dir=""), [])

    assert not result.ok
    assert result.error_kind == ErrorKind.CONFIGURATION
    assert "runtime_library_dir" in result.error
    assert marker.read_text(encoding="utf-8") == "keep me"
    assert not (Path(config.output_dir) / "root").exists()


def test_unset_runtime_dir_creates_nothing(config: DeployConfig) -> None:
    result = invoke(replace(config, runtime_library_dir=""), [])

    assert result.error_kind == ErrorKind.CONFIGURATION
    assert not os.path.exists(config.output_dir)


def test_nonexistent_runtime_dir_is_configuration_error(config: DeployConfig, tmp_path: Path) -> None:
    missing = str(tmp_path / "nowhere" / "lib")

    result = invoke(replace(config, runtime_library_dir=missing), [])

    assert result.error_kind == ErrorKind.CONFIGURATION
    assert result.error_path == missing


def test_missing_compiled_output_is_configuration_error(config: DeployConfig, tmp_path: Path) -> None:
    result = invoke(replace(config, compiled_output_dir=str(tmp_path / "no-classes")), [])

    assert result.error_kind == ErrorKind.CONFIGURATION
    assert not os.path.exists(config.output_dir)


def test_output_overlapping_sources_is_rejected(config: DeployConfig) -> None:
    result = invoke(replace(config, output_dir=config.compiled_output_dir), [])

    assert result.error_kind == ErrorKind.CONFIGURATION
    assert os.path.isdir(config.compiled_output_dir)
    assert os.path.isfile(os.path.join(config.compiled_output_dir, "log4j.properties"))


def test_unknown_strategy_is_configuration_error(config: DeployConfig) -> None:
    result = invoke(replace(config, exclusion_strategy="fuzzy"), [])

    assert result.error_kind == ErrorKind.CONFIGURATION
    assert "fuzzy" in result.error


# -----------------------------------------------------------------------------
# Runtime failures (after staging)
# -----------------------------------------------------------------------------

def test_unreadable_compiled_output_is_io_error(config: DeployConfig) -> None:
    stale = Path(config.output_dir) / "root" / "stale.class"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    err = PermissionError(13, "Permission denied", config.compiled_output_dir)
    with patch("hdeploy.core.pipeline.stages.staging.copy_directory_contents", side_effect=err):
        result = invoke(config, [])

    assert not result.ok
    assert result.error_kind == ErrorKind.IO
    assert result.error_path == config.compiled_output_dir
    # Staging was already reset and is not rolled back
    assert (Path(config.output_dir) / "root" / "lib").is_dir()
    assert not stale.exists()


def test_runtime_listing_failure_is_filter_error(config: DeployConfig, make_artifact) -> None:
    lib = make_artifact("com.example", "lib-utils", "2.1")

    with patch(
        "hdeploy.core.filtering.dependency_filter.list_files",
        side_effect=PermissionError(13, "Permission denied", config.runtime_library_dir),
    ):
        result = invoke(config, [lib])

    assert result.error_kind == ErrorKind.FILTER
    assert not os.path.exists(archive_path_for(config))


def test_archive_write_failure_is_io_error(config: DeployConfig) -> None:
    with patch(
        "hdeploy.core.archive.builder.shutil.copyfileobj",
        side_effect=OSError(28, "No space left on device"),
    ):
        result = invoke(config, [])

    assert result.error_kind == ErrorKind.IO
    assert "No space left on device" in result.error


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def test_submission_hint(config: DeployConfig) -> None:
    hint = submission_hint(config, "/tmp/x-hdeploy.jar")
    assert hint == (
        f"{os.path.join(config.runtime_home, 'bin', 'hadoop')} jar /tmp/x-hdeploy.jar "
        "<job.launching.mainClass>"
    )
    assert submission_hint(replace(config, runtime_home=""), "a.jar").startswith("hadoop jar a.jar")
