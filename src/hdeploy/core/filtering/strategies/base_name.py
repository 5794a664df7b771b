from __future__ import annotations

"""
Base-Name Exclusion Strategy.

Approximates an artifact identifier from a library filename by dropping the
final hyphen-delimited segment, which conventionally holds the version and
extension ('hadoop-core-1.0.0.jar' -> 'hadoop-core').
"""

from typing import Optional

from hdeploy.core.filtering.strategies.base import ExclusionStrategy
from hdeploy.domain.artifact_models import ArtifactReference


class BaseNameStrategy(ExclusionStrategy):
    """Match artifactIds against filenames with their version segment removed."""

    name = "base-name"

    def runtime_key(self, file_name: str) -> Optional[str]:
        """Text before the last hyphen; files without one are not keyed."""
        idx = file_name.rfind("-")
        if idx == -1:
            return None
        return file_name[:idx]

    def artifact_key(self, artifact: ArtifactReference) -> str:
        return artifact.artifact_id
