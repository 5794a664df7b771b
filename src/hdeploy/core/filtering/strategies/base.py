from __future__ import annotations

"""
Base Definitions for Dependency Exclusion Strategies.

The runtime library directory exposes no structured artifact identity, so
matching a project dependency against it is necessarily heuristic. A
strategy defines both halves of that approximation: the key derived from a
runtime library filename and the key derived from a candidate dependency.
"""

from abc import ABC, abstractmethod
from typing import Optional

from hdeploy.domain.artifact_models import ArtifactReference


class ExclusionStrategy(ABC):
    """
    Abstract matching rule between runtime libraries and project artifacts.
    """

    #: Registry name, also used in log messages.
    name: str = ""

    @abstractmethod
    def runtime_key(self, file_name: str) -> Optional[str]:
        """
        Derive the exclusion key of a runtime library file.

        Args:
            file_name: Basename of a file in the runtime library directory.

        Returns:
            Optional[str]: Key to add to the exclusion set, or None to ignore
                           the file.
        """
        pass

    @abstractmethod
    def artifact_key(self, artifact: ArtifactReference) -> str:
        """
        Derive the key of a candidate dependency.

        Args:
            artifact: Project dependency under evaluation.

        Returns:
            str: Key compared for exact membership in the exclusion set.
        """
        pass
