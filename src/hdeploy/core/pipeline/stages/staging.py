from __future__ import annotations

"""
Staging Area Preparation Stage.

Builds the disposable tree that mirrors the final archive layout:

    <output_dir>/root/       compiled project output
    <output_dir>/root/lib/   retained dependency libraries

The tree is deleted and recreated at the start of every run. Sources are
always copied, never moved.
"""

import logging
import os
from typing import Iterable, List, Sequence, Tuple

from hdeploy.domain.artifact_models import ArtifactReference
from hdeploy.domain.config import DeployConfig
from hdeploy.domain.constants import STAGING_LIB_NAME, STAGING_ROOT_NAME
from hdeploy.domain.errors import ConfigurationError
from hdeploy.infra.fs import (
    copy_directory_contents,
    copy_file_to_directory,
    reset_directory,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# PRE-FLIGHT CHECKS
# ==============================================================================

def check_required_settings(cfg: DeployConfig) -> None:
    """
    Verify required settings before anything on disk is touched.

    Raises:
        ConfigurationError: If the runtime library directory or compiled output
                            directory is unset or does not exist.
    """
    if not cfg.runtime_library_dir:
        raise ConfigurationError(
            "runtime_library_dir (or runtime_home) needs to be set for packaging to work"
        )
    if not cfg.compiled_output_dir:
        raise ConfigurationError("compiled_output_dir needs to be set for packaging to work")

    if not os.path.isdir(cfg.runtime_library_dir):
        raise ConfigurationError(
            f"Runtime library directory does not exist: {cfg.runtime_library_dir}",
            cfg.runtime_library_dir,
        )
    if not os.path.isdir(cfg.compiled_output_dir):
        raise ConfigurationError(
            f"Compiled output directory does not exist: {cfg.compiled_output_dir}",
            cfg.compiled_output_dir,
        )

    # The staging tree is wiped on every run: it must not overlap any source
    output_dir = os.path.abspath(cfg.output_dir)
    for label, source in (
            ("compiled output directory", cfg.compiled_output_dir),
            ("runtime library directory", cfg.runtime_library_dir),
    ):
        if _overlaps(output_dir, os.path.abspath(source)):
            raise ConfigurationError(
                f"Output directory {output_dir} overlaps the {label} {source}",
                output_dir,
            )


def _overlaps(a: str, b: str) -> bool:
    """True if one path equals or contains the other."""
    try:
        common = os.path.commonpath([a, b])
    except ValueError:
        # Different drives
        return False
    return common in (a, b)


# ==============================================================================
# STAGING TREE
# ==============================================================================

def prepare_staging(output_dir: str) -> Tuple[str, str]:
    """
    Delete any previous staging tree and recreate root/ and root/lib/.

    Args:
        output_dir: Staging and archive location.

    Returns:
        Tuple[str, str]: (staging root, library directory).
    """
    reset_directory(output_dir)

    root_dir = os.path.join(output_dir, STAGING_ROOT_NAME)
    lib_dir = os.path.join(root_dir, STAGING_LIB_NAME)
    os.makedirs(lib_dir)

    logger.debug(f"Staging area initialized at {root_dir}")
    return root_dir, lib_dir


def stage_compiled_output(compiled_output_dir: str, root_dir: str) -> None:
    """Copy the compiled output tree into the staging root."""
    logger.debug(f"Copying compiled output from {compiled_output_dir}")
    copy_directory_contents(compiled_output_dir, root_dir)


def select_library_artifacts(
        artifacts: Iterable[ArtifactReference],
        packaging_types: Sequence[str],
) -> List[ArtifactReference]:
    """
    Keep the dependencies that are library archives with a usable file.

    Non-library packaging types are skipped silently. A library whose backing
    file is unresolved or missing is skipped with a warning.

    Args:
        artifacts: All project dependencies.
        packaging_types: Packaging types that denote libraries.

    Returns:
        List[ArtifactReference]: Library dependencies, order preserved.
    """
    selected: List[ArtifactReference] = []
    for artifact in artifacts:
        if artifact.packaging_type not in packaging_types:
            logger.debug(f"Skipping non-library dependency {artifact}")
            continue
        if not artifact.file or not os.path.isfile(artifact.file):
            logger.warning(f"Dependency file not found: {artifact}")
            continue
        selected.append(artifact)
    return selected


def stage_dependencies(artifacts: Iterable[ArtifactReference], lib_dir: str) -> List[str]:
    """
    Copy each dependency's backing file into the staging library directory.

    Args:
        artifacts: Retained dependencies.
        lib_dir: Staging library directory.

    Returns:
        List[str]: Paths of the staged copies.
    """
    staged: List[str] = []
    for artifact in sorted(artifacts, key=lambda a: (a.file_name, str(a))):
        destination = os.path.join(lib_dir, os.path.basename(artifact.file or ""))
        if os.path.exists(destination):
            logger.warning(
                f"Dependency {artifact} overwrites {os.path.basename(destination)} "
                f"already staged from another artifact"
            )
        staged.append(copy_file_to_directory(artifact.file or "", lib_dir))
    return staged
