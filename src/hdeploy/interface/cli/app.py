from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Adapter between a shell and the packaging engine: initializes logging,
resolves configuration (defaults, JSON file, project descriptor, flags),
runs the engine and maps its result to an exit code.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from hdeploy.core.pipeline.engine import invoke
from hdeploy.core.pipeline.stages.validator import validate_config
from hdeploy.core.services.project_loader import load_project_model
from hdeploy.domain.artifact_models import ArtifactReference, ProjectModel
from hdeploy.domain.config import DeployConfig, get_default_config, load_config, save_config
from hdeploy.domain.constants import DEFAULT_PROJECT_FILENAME
from hdeploy.domain.deploy_models import DeployResult
from hdeploy.domain.errors import ConfigurationError, ErrorKind
from hdeploy.infra.logging import LoggingConfig, configure_logging, get_logger
from hdeploy.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 2 on configuration errors, 1 on other failures.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_run(
        debug=args.debug,
        quiet=args.quiet,
        log_file=args.log_file,
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backup_count,
    ))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 1. Configuration sources
    try:
        base_conf = get_default_config() if args.use_defaults else load_config(args.config_file)
        project = _load_project(args.project_file, args.local_repository)
    except ConfigurationError as e:
        return _fail(str(e), EXIT_CONFIG)

    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)
    if project is not None:
        _fill_from_project(raw_conf, project)

    # 2. Validation
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    config = DeployConfig.from_dict(clean_conf)

    if args.dump_config:
        print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config_path:
        return _save_resolved_config(clean_conf, args.save_config_path)

    artifacts: List[ArtifactReference] = list(project.artifacts) if project else []

    # 3. Packaging
    try:
        result = invoke(config, artifacts)
    except KeyboardInterrupt:
        msg = "Packaging interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        msg = f"Unexpected packaging failure: {e}"
        logger.critical(msg, exc_info=True)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    # 4. Rendering
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return exit_code_for(result)


def exit_code_for(result: DeployResult) -> int:
    """Map a packaging result to a process exit code."""
    if result.ok:
        return EXIT_OK
    if result.error_kind == ErrorKind.CONFIGURATION:
        return EXIT_CONFIG
    return EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None overrides into the base configuration.

    Only keys known to the default schema are merged.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


def _fill_from_project(conf: Dict[str, Any], project: ProjectModel) -> None:
    """Use the project model for layout settings not given explicitly."""
    derived = {
        "project_identifier": project.artifact_id,
        "build_directory": project.build_directory,
        "compiled_output_dir": project.compiled_output_dir,
    }
    for key, value in derived.items():
        if not conf.get(key):
            conf[key] = value


def _load_project(path: Optional[str], local_repository: Optional[str]) -> Optional[ProjectModel]:
    """Load the explicit descriptor, or the default one if present."""
    if path:
        return load_project_model(path, local_repository)

    default_path = os.path.join(os.getcwd(), DEFAULT_PROJECT_FILENAME)
    if os.path.isfile(default_path):
        return load_project_model(default_path, local_repository)

    logger.debug("No project descriptor given; packaging without dependencies.")
    return None


def _save_resolved_config(conf: Dict[str, Any], path: str) -> int:
    """Persist the validated settings so later runs can use them via --config."""
    try:
        save_config(conf, path)
    except OSError as e:
        return _fail(f"Failed to save configuration to '{path}': {e}", EXIT_FAILURE)
    print(f"Configuration saved to {path}")
    return EXIT_OK


def _fail(msg: str, code: int) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return code

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: DeployResult) -> None:
    """Print the packaging result to standard output (errors to stderr)."""
    if not result.ok:
        kind = result.error_kind.value if result.error_kind else "Error"
        print(f"ERROR ({kind}): {result.error}", file=sys.stderr)
        return

    summary = result.summary
    print("PACKAGING COMPLETE")
    print(f"Job archive: {result.archive_path}")
    print(f"Archive entries: {summary.get('entries', 0)}")

    retained = summary.get("retained", [])
    print(f"Bundled dependencies: {len(retained)}")
    for name in retained:
        print(f"  + {name}")

    excluded = summary.get("excluded", {})
    if excluded:
        print(f"Excluded dependencies: {len(excluded)}")
        for name, reason in excluded.items():
            print(f"  - {name} ({reason})")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
