from __future__ import annotations

"""
Deployment Result Models.

Defines the result object returned by the packaging engine to interface
layers, together with the factory functions that build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from hdeploy.domain.config import DeployConfig
from hdeploy.domain.errors import ErrorKind

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DeployResult:
    """
    Outcome of a single packaging invocation.

    An invocation either produces a complete archive (ok=True) or reports a
    failure whose partial output must not be consumed.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Failure category, None on success.
        error_path: Offending path for failures, when known.
        project_identifier: Name of the packaged project.
        output_dir: Staging and archive location.
        staging_root: Root of the staged archive tree.
        archive_path: Absolute path of the produced archive.
        summary: Execution statistics (retained/excluded dependencies, ...).
    """
    ok: bool
    error: str

    project_identifier: str
    output_dir: str

    error_kind: Optional[ErrorKind] = None
    error_path: str = ""
    staging_root: str = ""
    archive_path: str = ""

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        kind: ErrorKind,
        cfg: DeployConfig,
        path: Optional[str] = None,
        staging_root: str = "",
        summary_extra: Optional[Dict[str, Any]] = None
) -> DeployResult:
    """
    Create a failed deployment result.

    Args:
        error: Detailed error description.
        kind: Category of the failure.
        cfg: Configuration of the failed run.
        path: Offending filesystem path.
        staging_root: Staging root, if it had been created.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        DeployResult: An immutable error result.
    """
    return DeployResult(
        ok=False,
        error=error,
        error_kind=kind,
        error_path=path or "",
        project_identifier=cfg.project_identifier,
        output_dir=cfg.output_dir,
        staging_root=staging_root,
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: DeployConfig,
        staging_root: str,
        archive_path: str,
        summary_extra: Optional[Dict[str, Any]] = None
) -> DeployResult:
    """
    Create a successful deployment result.

    Args:
        cfg: Configuration used during execution.
        staging_root: Root of the staged archive tree.
        archive_path: Absolute path of the produced archive.
        summary_extra: Final execution metrics.

    Returns:
        DeployResult: An immutable success result.
    """
    return DeployResult(
        ok=True,
        error="",
        project_identifier=cfg.project_identifier,
        output_dir=cfg.output_dir,
        staging_root=staging_root,
        archive_path=archive_path,
        summary=summary_extra or {},
    )
