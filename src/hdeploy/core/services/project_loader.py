from __future__ import annotations

"""
Project Descriptor Loader.

Reads the JSON project descriptor that stands in for a build tool's project
model: the project identifier, build directories and resolved dependencies.

Example descriptor:

    {
      "artifactId": "wordcount",
      "buildDirectory": "target",
      "outputDirectory": "target/classes",
      "artifacts": [
        {"groupId": "com.google.guava", "artifactId": "guava",
         "version": "31.1-jre", "type": "jar",
         "file": "libs/guava-31.1-jre.jar"}
      ]
    }

Relative paths resolve against the descriptor's directory. An artifact with
no 'file' is looked up in a Maven-layout local repository.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from hdeploy.domain.artifact_models import ArtifactReference, ProjectModel
from hdeploy.domain.constants import DEFAULT_CLASSES_SUBDIR
from hdeploy.domain.errors import ConfigurationError
from hdeploy.infra.fs import resolve_against

logger = logging.getLogger(__name__)

DEFAULT_BUILD_DIRECTORY = "target"


def default_local_repository() -> str:
    """Location of the user's Maven local repository."""
    return os.path.join(os.path.expanduser("~"), ".m2", "repository")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_project_model(path: str, local_repository: Optional[str] = None) -> ProjectModel:
    """
    Parse a project descriptor file.

    Args:
        path: JSON descriptor location.
        local_repository: Repository used to locate artifacts without a 'file'.

    Returns:
        ProjectModel: The parsed project.

    Raises:
        ConfigurationError: If the descriptor is missing or malformed.
    """
    if not os.path.isfile(path):
        raise ConfigurationError(f"Project descriptor not found: {path}", path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read project descriptor '{path}': {e}", path) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Project descriptor '{path}' must be a JSON object.", path)

    base_dir = os.path.dirname(os.path.abspath(path))
    return parse_project_model(data, base_dir, local_repository)


def parse_project_model(
        data: Dict[str, Any],
        base_dir: str,
        local_repository: Optional[str] = None,
) -> ProjectModel:
    """
    Build a ProjectModel from an already decoded descriptor.

    Args:
        data: Decoded descriptor object.
        base_dir: Directory relative paths resolve against.
        local_repository: Repository used to locate artifacts without a 'file'.

    Returns:
        ProjectModel: The parsed project.
    """
    artifact_id = _require_str(data, "artifactId", "project")

    build_dir = resolve_against(str(data.get("buildDirectory") or DEFAULT_BUILD_DIRECTORY), base_dir)
    output_dir = data.get("outputDirectory")
    if output_dir:
        compiled_dir = resolve_against(str(output_dir), base_dir)
    else:
        compiled_dir = os.path.join(build_dir, DEFAULT_CLASSES_SUBDIR)

    raw_artifacts = data.get("artifacts", data.get("dependencies", []))
    if not isinstance(raw_artifacts, list):
        raise ConfigurationError("Project descriptor field 'artifacts' must be a list.")

    repo = local_repository or default_local_repository()
    artifacts = [_parse_artifact(item, i, base_dir, repo) for i, item in enumerate(raw_artifacts)]

    logger.debug(f"Project '{artifact_id}' declares {len(artifacts)} artifacts")
    return ProjectModel(
        artifact_id=artifact_id,
        build_directory=build_dir,
        compiled_output_dir=compiled_dir,
        artifacts=artifacts,
    )


def repository_path(repository: str, group_id: str, artifact_id: str, version: str,
                    packaging_type: str, classifier: str = "") -> str:
    """Maven-layout path of an artifact inside a local repository."""
    suffix = f"-{classifier}" if classifier else ""
    file_name = f"{artifact_id}-{version}{suffix}.{packaging_type}"
    return os.path.join(repository, *group_id.split("."), artifact_id, version, file_name)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _parse_artifact(item: Any, index: int, base_dir: str, repository: str) -> ArtifactReference:
    if not isinstance(item, dict):
        raise ConfigurationError(f"Invalid artifact at index {index}: expected an object.")

    where = f"artifacts[{index}]"
    group_id = _require_str(item, "groupId", where)
    artifact_id = _require_str(item, "artifactId", where)
    version = _require_str(item, "version", where)
    packaging_type = str(item.get("type") or "jar")

    raw_file = item.get("file")
    if raw_file:
        file_path = resolve_against(str(raw_file), base_dir)
    else:
        file_path = repository_path(
            repository, group_id, artifact_id, version, packaging_type,
            str(item.get("classifier") or ""),
        )

    return ArtifactReference(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        packaging_type=packaging_type,
        file=file_path,
    )


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"Project descriptor {where}: missing or invalid '{key}'.")
    return value.strip()
