from __future__ import annotations

"""
File-Name Exclusion Strategy.

Matches a dependency only when its backing file carries exactly the same
filename as a runtime library, i.e. same artifact and same version.
"""

from typing import Optional

from hdeploy.core.filtering.strategies.base import ExclusionStrategy
from hdeploy.domain.artifact_models import ArtifactReference


class FileNameStrategy(ExclusionStrategy):
    """Exact filename equality between runtime libraries and dependencies."""

    name = "file-name"

    def runtime_key(self, file_name: str) -> Optional[str]:
        return file_name

    def artifact_key(self, artifact: ArtifactReference) -> str:
        return artifact.file_name
