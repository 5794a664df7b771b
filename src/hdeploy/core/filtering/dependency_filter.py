from __future__ import annotations

"""
Runtime Dependency Exclusion Engine.

Computes the subset of project dependencies that must travel inside the job
archive: everything the project needs minus everything the target runtime
already places on its own classpath. Runtime libraries are identified only
by filename, so membership is decided through a pluggable ExclusionStrategy,
complemented by two namespace rules for runtime-owned artifacts.
"""

import logging
import os
from typing import Dict, FrozenSet, Iterable, Optional, Sequence, Set, Tuple

from hdeploy.core.filtering.strategies import ExclusionStrategy, get_strategy
from hdeploy.domain.artifact_models import ArtifactReference
from hdeploy.domain.constants import (
    DEFAULT_EXCLUSION_STRATEGY,
    DEFAULT_LIBRARY_EXTENSIONS,
    DEFAULT_RESERVED_ARTIFACT_PREFIX,
    DEFAULT_RESERVED_GROUP_PREFIX,
    STUB_ARTIFACT_PREFIX,
)
from hdeploy.domain.errors import FilterError
from hdeploy.infra.fs import list_files

logger = logging.getLogger(__name__)


class DependencyFilter:
    """
    Heuristic set-difference between project dependencies and runtime libraries.

    A dependency is excluded when any of the following holds:
    1. Its strategy key is in the exclusion set derived from the runtime
       library directory.
    2. Its groupId starts with the reserved group prefix and its artifactId
       starts with the reserved artifact prefix.
    3. Its artifactId starts with the runtime stub prefix ('jsp-').

    The filter is pure with respect to its inputs, hence idempotent.
    """

    def __init__(
            self,
            strategy: Optional[ExclusionStrategy] = None,
            reserved_group_prefix: str = DEFAULT_RESERVED_GROUP_PREFIX,
            reserved_artifact_prefix: str = DEFAULT_RESERVED_ARTIFACT_PREFIX,
            library_extensions: Sequence[str] = tuple(DEFAULT_LIBRARY_EXTENSIONS),
    ) -> None:
        self.strategy = strategy or get_strategy(DEFAULT_EXCLUSION_STRATEGY)
        self.reserved_group_prefix = reserved_group_prefix
        self.reserved_artifact_prefix = reserved_artifact_prefix
        self.library_extensions = tuple(library_extensions)

    # -------------------------------------------------------------------------
    # Exclusion set
    # -------------------------------------------------------------------------

    def exclusion_set(self, runtime_library_dir: str) -> FrozenSet[str]:
        """
        Derive the keys of every library found under the runtime directory.

        Args:
            runtime_library_dir: Directory of runtime-supplied libraries.

        Returns:
            FrozenSet[str]: Exclusion keys.

        Raises:
            FilterError: If the directory is missing, not a directory, or any
                         part of it cannot be listed.
        """
        if not os.path.isdir(runtime_library_dir):
            raise FilterError(
                f"Runtime library directory does not exist or is not a directory: {runtime_library_dir}",
                runtime_library_dir,
            )

        try:
            library_files = list_files(runtime_library_dir, self.library_extensions)
        except OSError as e:
            raise FilterError(
                f"Failed to list runtime library directory '{runtime_library_dir}': {e}",
                getattr(e, "filename", None) or runtime_library_dir,
            ) from e

        keys: Set[str] = set()
        for library in library_files:
            key = self.strategy.runtime_key(os.path.basename(library))
            if key:
                keys.add(key)

        logger.debug(f"Runtime exclusion set ({self.strategy.name}): {sorted(keys)}")
        return frozenset(keys)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def exclusion_reason(self, artifact: ArtifactReference, exclusions: FrozenSet[str]) -> Optional[str]:
        """
        Explain why an artifact is excluded.

        Returns:
            Optional[str]: Human-readable reason, or None if retained.
        """
        name = artifact.artifact_id
        group = artifact.group_id

        if self.strategy.artifact_key(artifact) in exclusions:
            return "it is provided by the runtime library directory"
        if (
                self.reserved_group_prefix
                and self.reserved_artifact_prefix
                and group.startswith(self.reserved_group_prefix)
                and name.startswith(self.reserved_artifact_prefix)
        ):
            return (
                f"it is in '{self.reserved_group_prefix}' and starts with "
                f"'{self.reserved_artifact_prefix}'"
            )
        if name.startswith(STUB_ARTIFACT_PREFIX):
            return f"it starts with '{STUB_ARTIFACT_PREFIX}'"
        return None

    def partition(
            self,
            dependencies: Iterable[ArtifactReference],
            runtime_library_dir: str,
    ) -> Tuple[Set[ArtifactReference], Dict[ArtifactReference, str]]:
        """
        Split dependencies into retained and excluded groups.

        Args:
            dependencies: Candidate project dependencies.
            runtime_library_dir: Directory of runtime-supplied libraries.

        Returns:
            Tuple[Set[ArtifactReference], Dict[ArtifactReference, str]]:
                Retained artifacts, and excluded artifacts mapped to reasons.
        """
        exclusions = self.exclusion_set(runtime_library_dir)

        retained: Set[ArtifactReference] = set()
        excluded: Dict[ArtifactReference, str] = {}

        for artifact in set(dependencies):
            reason = self.exclusion_reason(artifact, exclusions)
            if reason:
                logger.info(f"Ignoring {artifact} ({reason})")
                excluded[artifact] = reason
            else:
                retained.add(artifact)

        return retained, excluded

    def filter(
            self,
            dependencies: Iterable[ArtifactReference],
            runtime_library_dir: str,
    ) -> Set[ArtifactReference]:
        """
        Return the dependencies not supplied by the runtime.

        Args:
            dependencies: Candidate project dependencies.
            runtime_library_dir: Directory of runtime-supplied libraries.

        Returns:
            Set[ArtifactReference]: Retained dependencies.
        """
        retained, _ = self.partition(dependencies, runtime_library_dir)
        return retained


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def filter_dependencies(
        dependencies: Iterable[ArtifactReference],
        runtime_library_dir: str,
        strategy: str = DEFAULT_EXCLUSION_STRATEGY,
) -> Set[ArtifactReference]:
    """
    Filter runtime-supplied dependencies using default namespace rules.

    Args:
        dependencies: Candidate project dependencies.
        runtime_library_dir: Directory of runtime-supplied libraries.
        strategy: Registered exclusion strategy name.

    Returns:
        Set[ArtifactReference]: Retained dependencies.
    """
    return DependencyFilter(strategy=get_strategy(strategy)).filter(dependencies, runtime_library_dir)
