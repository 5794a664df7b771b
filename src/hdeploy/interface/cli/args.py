from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

from hdeploy.core.filtering.strategies import available_strategies
from hdeploy.domain.constants import APP_VERSION

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the hdeploy CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="hdeploy",
        description=(
            "Pack compiled classes and the dependencies missing from the Hadoop "
            "classpath into a single job jar."
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    # --- Project Model ---
    p.add_argument(
        "-p", "--project",
        dest="project_file",
        default=None,
        help="JSON project descriptor (default: ./hdeploy-project.json if present).",
    )
    p.add_argument(
        "--local-repo",
        dest="local_repository",
        default=None,
        help="Maven-layout repository used to locate artifacts without a 'file'.",
    )

    # --- Runtime Environment ---
    p.add_argument(
        "--hadoop-home", "--runtime-home",
        dest="runtime_home",
        default=None,
        help="Runtime installation root; its 'lib' directory is the exclusion reference.",
    )
    p.add_argument(
        "--runtime-lib",
        dest="runtime_library_dir",
        default=None,
        help="Runtime library directory (overrides <runtime-home>/lib).",
    )

    # --- Layout ---
    p.add_argument(
        "--classes",
        dest="compiled_output_dir",
        default=None,
        help="Compiled output directory to pack.",
    )
    p.add_argument(
        "-o", "--output-dir",
        dest="output_dir",
        default=None,
        help="Staging and archive directory (default: <build-dir>/hadoop-deploy).",
    )
    p.add_argument(
        "--name",
        dest="project_identifier",
        default=None,
        help="Project identifier used to name '<name>-hdeploy.jar'.",
    )

    # --- Dependency Exclusion ---
    p.add_argument(
        "--strategy",
        dest="exclusion_strategy",
        choices=available_strategies(),
        default=None,
        help="How runtime libraries are matched against dependencies.",
    )
    p.add_argument(
        "--group-prefix",
        dest="reserved_group_prefix",
        default=None,
        help="Reserved runtime groupId prefix (default: org.apache).",
    )
    p.add_argument(
        "--artifact-prefix",
        dest="reserved_artifact_prefix",
        default=None,
        help="Reserved runtime artifactId prefix (default: hadoop).",
    )
    p.add_argument(
        "--lib-ext",
        dest="library_extensions",
        default=None,
        help="Comma-separated runtime library extensions (default: .jar).",
    )
    p.add_argument(
        "--packaging",
        dest="library_packaging_types",
        default=None,
        help="Comma-separated dependency packaging types to pack (default: jar).",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file (default: ./hdeploy.json if present).",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore configuration files.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the resolved configuration as JSON and exit.",
    )
    p.add_argument(
        "--save-config",
        dest="save_config_path",
        default=None,
        help="Write the resolved configuration to a JSON file and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write a rotating build log to this file.",
    )
    p.add_argument(
        "--log-max-bytes",
        dest="log_max_bytes",
        type=int,
        default=None,
        help="Build log size that triggers rotation (default: 1 MiB).",
    )
    p.add_argument(
        "--log-backups",
        dest="log_backup_count",
        type=int,
        default=None,
        help="Number of rotated build logs to keep (default: 2).",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides (None means 'not given').
    """
    overrides: Dict[str, Any] = {}

    overrides["runtime_home"] = args.runtime_home
    overrides["runtime_library_dir"] = args.runtime_library_dir
    overrides["compiled_output_dir"] = args.compiled_output_dir
    overrides["output_dir"] = args.output_dir
    overrides["project_identifier"] = args.project_identifier

    overrides["exclusion_strategy"] = args.exclusion_strategy
    overrides["reserved_group_prefix"] = args.reserved_group_prefix
    overrides["reserved_artifact_prefix"] = args.reserved_artifact_prefix

    if args.library_extensions:
        overrides["library_extensions"] = _split_csv(args.library_extensions)
    if args.library_packaging_types:
        overrides["library_packaging_types"] = _split_csv(args.library_packaging_types)

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of sanitized strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
