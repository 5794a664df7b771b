from __future__ import annotations

"""
Deployment Packaging Pipeline.

Coordinates a single packaging run:
1. Validates required settings (no filesystem mutation before this passes).
2. Resets the staging tree.
3. Copies the compiled output into the staging root.
4. Selects library dependencies and filters out runtime-supplied ones.
5. Copies retained dependencies into root/lib.
6. Packs the staging root into '<project>-hdeploy.jar'.

Failures are never raised to the caller: they are reported as a DeployResult
carrying a closed ErrorKind. Partial staging or archive output is left in
place and must not be consumed.
"""

import logging
import os
from typing import Iterable, Optional

from hdeploy.core.archive.builder import ArchiveBuilder
from hdeploy.core.filtering.dependency_filter import DependencyFilter
from hdeploy.core.filtering.strategies import get_strategy
from hdeploy.core.pipeline.stages.staging import (
    check_required_settings,
    prepare_staging,
    select_library_artifacts,
    stage_compiled_output,
    stage_dependencies,
)
from hdeploy.domain.artifact_models import ArtifactReference
from hdeploy.domain.config import DeployConfig
from hdeploy.domain.constants import ARCHIVE_EXTENSION, ARCHIVE_SUFFIX
from hdeploy.domain.deploy_models import (
    DeployResult,
    create_error_result,
    create_success_result,
)
from hdeploy.domain.errors import ConfigurationError, DeployError, ErrorKind

logger = logging.getLogger(__name__)


def invoke(
        config: DeployConfig,
        artifacts: Iterable[ArtifactReference],
        *,
        builder: Optional[ArchiveBuilder] = None,
        dependency_filter: Optional[DependencyFilter] = None,
) -> DeployResult:
    """
    Assemble the deployable job archive for a project.

    Args:
        config: Immutable packaging settings.
        artifacts: Resolved project dependencies.
        builder: Archive serializer override.
        dependency_filter: Exclusion engine override; built from config if None.

    Returns:
        DeployResult: Archive path on success, error kind and message otherwise.
    """
    logger.info("Packaging started.")

    # -------------------------------------------------------------------------
    # 1) Pre-flight validation
    # -------------------------------------------------------------------------
    try:
        check_required_settings(config)
        dep_filter = dependency_filter or build_dependency_filter(config)
    except ConfigurationError as e:
        logger.error(str(e))
        return create_error_result(str(e), e.kind, config, e.path)

    logger.info(f"Runtime library directory set to {config.runtime_library_dir}")

    # -------------------------------------------------------------------------
    # 2) Staging & packing
    # -------------------------------------------------------------------------
    staging_root = ""
    try:
        staging_root, lib_dir = prepare_staging(config.output_dir)
        stage_compiled_output(config.compiled_output_dir, staging_root)

        libraries = select_library_artifacts(artifacts, config.library_packaging_types)
        retained, excluded = dep_filter.partition(libraries, config.runtime_library_dir)

        retained_names = sorted(str(a) for a in retained)
        logger.info(f"Dependencies of this project independent of the runtime classpath: {retained_names}")

        staged_files = stage_dependencies(retained, lib_dir)

        archive_path = archive_path_for(config)
        entries = (builder or ArchiveBuilder()).pack_to_file(staging_root, archive_path)

    except DeployError as e:
        logger.error(str(e))
        return create_error_result(str(e), e.kind, config, e.path, staging_root)
    except OSError as e:
        path = e.filename or ""
        msg = f"I/O failure during packaging{f' at {path}' if path else ''}: {e}"
        logger.error(msg)
        return create_error_result(msg, ErrorKind.IO, config, path, staging_root)

    # -------------------------------------------------------------------------
    # 3) Reporting
    # -------------------------------------------------------------------------
    logger.info(f"Job archive available at {archive_path}")
    logger.info("Job ready to be executed as below:")
    logger.info(submission_hint(config, archive_path))

    summary = {
        "archive_path": archive_path,
        "staging_root": staging_root,
        "exclusion_strategy": config.exclusion_strategy,
        "libraries": len(libraries),
        "retained": retained_names,
        "excluded": {str(a): reason for a, reason in sorted(excluded.items(), key=lambda kv: str(kv[0]))},
        "staged_files": [os.path.basename(p) for p in staged_files],
        "entries": len(entries),
    }

    logger.info("Packaging completed successfully.")
    return create_success_result(config, staging_root, archive_path, summary)


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def build_dependency_filter(config: DeployConfig) -> DependencyFilter:
    """
    Build the exclusion engine described by the configuration.

    Raises:
        ConfigurationError: If the exclusion strategy is not registered.
    """
    try:
        strategy = get_strategy(config.exclusion_strategy)
    except KeyError as e:
        raise ConfigurationError(str(e.args[0])) from e

    return DependencyFilter(
        strategy=strategy,
        reserved_group_prefix=config.reserved_group_prefix,
        reserved_artifact_prefix=config.reserved_artifact_prefix,
        library_extensions=config.library_extensions,
    )


def archive_path_for(config: DeployConfig) -> str:
    """Absolute path of the archive produced for this configuration."""
    name = f"{config.project_identifier}{ARCHIVE_SUFFIX}{ARCHIVE_EXTENSION}"
    return os.path.abspath(os.path.join(config.output_dir, name))


def submission_hint(config: DeployConfig, archive_path: str) -> str:
    """Command line submitting the archive to the runtime."""
    if config.runtime_home:
        launcher = os.path.join(config.runtime_home, "bin", "hadoop")
    else:
        launcher = "hadoop"
    return f"{launcher} jar {archive_path} <job.launching.mainClass>"
