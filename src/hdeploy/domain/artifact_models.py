from __future__ import annotations

"""
Artifact and Project Domain Models.

Defines the immutable coordinates of a project dependency and the project
model that supplies them, as handed over by the project descriptor loader.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

# -----------------------------------------------------------------------------
# DEPENDENCY MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ArtifactReference:
    """
    Coordinates of a single resolved project dependency.

    Instances are hashable so that dependency collections behave as sets.

    Attributes:
        group_id: Organizational namespace (e.g. 'org.apache.commons').
        artifact_id: Component name (e.g. 'commons-lang3').
        version: Version string.
        packaging_type: Packaging of the artifact ('jar', 'pom', ...).
        file: Absolute path of the backing file, if resolved.
    """
    group_id: str
    artifact_id: str
    version: str
    packaging_type: str = "jar"
    file: Optional[str] = None

    @property
    def file_name(self) -> str:
        """Basename of the backing file, or the conventional one if unresolved."""
        if self.file:
            return os.path.basename(self.file)
        return f"{self.artifact_id}-{self.version}.{self.packaging_type}"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.packaging_type}:{self.version}"


# -----------------------------------------------------------------------------
# PROJECT MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectModel:
    """
    Minimal view of a built project.

    Attributes:
        artifact_id: Project identifier used to name the final archive.
        build_directory: Root of the build output (e.g. 'target').
        compiled_output_dir: Directory holding compiled classes/resources.
        artifacts: Resolved dependencies of the project.
    """
    artifact_id: str
    build_directory: str
    compiled_output_dir: str
    artifacts: List[ArtifactReference] = field(default_factory=list)
