from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures describing a runtime library directory, a compiled
   project tree and resolved dependency artifacts.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from hdeploy.domain.artifact_models import ArtifactReference  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def runtime_lib_dir(tmp_path: Path) -> Path:
    """
    Create a fake runtime library directory.

    Structure:
    /hadoop/lib
      hadoop-core-1.0.0.jar
      commons-logging-1.1.1.jar
      README.txt
      /jsp-2.1
        jsp-api-2.1.jar
    """
    lib = tmp_path / "hadoop" / "lib"
    lib.mkdir(parents=True)
    (lib / "hadoop-core-1.0.0.jar").write_bytes(b"runtime")
    (lib / "commons-logging-1.1.1.jar").write_bytes(b"runtime")
    (lib / "README.txt").write_text("not a library", encoding="utf-8")

    nested = lib / "jsp-2.1"
    nested.mkdir()
    (nested / "jsp-api-2.1.jar").write_bytes(b"runtime")
    return lib


@pytest.fixture
def compiled_dir(tmp_path: Path) -> Path:
    """
    Create a fake compiled output tree.

    Structure:
    /project/target/classes
      /com/example
        Job.class
      log4j.properties
    """
    classes = tmp_path / "project" / "target" / "classes"
    pkg = classes / "com" / "example"
    pkg.mkdir(parents=True)
    (pkg / "Job.class").write_bytes(b"\xca\xfe\xba\xbe")
    (classes / "log4j.properties").write_text("log4j.rootLogger=INFO\n", encoding="utf-8")
    return classes


@pytest.fixture
def make_artifact(tmp_path: Path) -> Callable[..., ArtifactReference]:
    """
    Factory of artifacts backed by a real file under tmp_path/repo.

    Pass create=False to get an artifact whose file does not exist.
    """
    repo = tmp_path / "repo"
    repo.mkdir(exist_ok=True)

    def _make(
            group_id: str,
            artifact_id: str,
            version: str = "1.0",
            packaging_type: str = "jar",
            create: bool = True,
            content: bytes = b"library",
    ) -> ArtifactReference:
        path = repo / f"{artifact_id}-{version}.{packaging_type}"
        if create:
            path.write_bytes(content)
        return ArtifactReference(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            packaging_type=packaging_type,
            file=str(path),
        )

    return _make


@pytest.fixture
def deploy_config_dict(runtime_lib_dir: Path, compiled_dir: Path, tmp_path: Path) -> Dict[str, Any]:
    """Return a complete configuration dictionary pointing at the fake trees."""
    return {
        "runtime_home": str(runtime_lib_dir.parent),
        "runtime_library_dir": str(runtime_lib_dir),
        "build_directory": str(compiled_dir.parent),
        "compiled_output_dir": str(compiled_dir),
        "output_dir": str(tmp_path / "out" / "hadoop-deploy"),
        "project_identifier": "wordcount",
        "exclusion_strategy": "base-name",
        "reserved_group_prefix": "org.apache",
        "reserved_artifact_prefix": "hadoop",
        "library_extensions": [".jar"],
        "library_packaging_types": ["jar"],
    }
