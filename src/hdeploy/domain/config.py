from __future__ import annotations

"""
Configuration Domain Management.

Provides the default settings dictionary, optional persistence through a
project-local JSON file, and the immutable DeployConfig value consumed by
the packaging engine.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

from hdeploy.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_EXCLUSION_STRATEGY,
    DEFAULT_LIBRARY_EXTENSIONS,
    DEFAULT_LIBRARY_PACKAGING_TYPES,
    DEFAULT_OUTPUT_SUBDIR,
    DEFAULT_RESERVED_ARTIFACT_PREFIX,
    DEFAULT_RESERVED_GROUP_PREFIX,
)
from hdeploy.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Path settings are empty until supplied by the project descriptor, a
    configuration file or the command line.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Runtime Environment
        "runtime_home": "",
        "runtime_library_dir": "",

        # Project Layout
        "build_directory": "",
        "compiled_output_dir": "",
        "output_dir": "",
        "project_identifier": "",

        # Dependency Exclusion
        "exclusion_strategy": DEFAULT_EXCLUSION_STRATEGY,
        "reserved_group_prefix": DEFAULT_RESERVED_GROUP_PREFIX,
        "reserved_artifact_prefix": DEFAULT_RESERVED_ARTIFACT_PREFIX,
        "library_extensions": list(DEFAULT_LIBRARY_EXTENSIONS),
        "library_packaging_types": list(DEFAULT_LIBRARY_PACKAGING_TYPES),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load settings from a JSON file merged over the defaults.

    When no path is given, a 'hdeploy.json' in the working directory is used
    if present. An explicitly requested file that is missing, unreadable or
    malformed is a configuration error.

    Args:
        path: Optional explicit configuration file.

    Returns:
        Dict[str, Any]: The merged configuration.

    Raises:
        ConfigurationError: If the file cannot be used.
    """
    defaults = get_default_config()

    explicit = bool(path)
    config_path = path or os.path.join(os.getcwd(), DEFAULT_CONFIG_FILENAME)

    if not os.path.exists(config_path):
        if explicit:
            raise ConfigurationError(f"Configuration file not found: {config_path}", config_path)
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to load config '{config_path}': {e}", config_path) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Corrupted config file '{config_path}': expected an object.", config_path)

    data.pop("version", None)
    defaults.update(data)
    logger.debug(f"Configuration loaded from {config_path}")
    return defaults


def save_config(config: Dict[str, Any], path: str) -> None:
    """
    Persist a configuration dictionary as JSON.

    Args:
        config: Settings to write.
        path: Target file.
    """
    state = dict(config)
    state["version"] = CURRENT_CONFIG_VERSION
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(state, f, ensure_ascii=False, indent=4)
    logger.debug(f"Configuration saved to {path}")


# -----------------------------------------------------------------------------
# Immutable Invocation Value
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DeployConfig:
    """
    Immutable settings for a single packaging invocation.

    Attributes:
        runtime_library_dir: Libraries supplied by the target runtime.
        compiled_output_dir: Project build output (classes and resources).
        output_dir: Location of the staging tree and final archive.
        project_identifier: Name used for the final archive.
        runtime_home: Optional runtime installation root, used for hints.
        exclusion_strategy: Registered name of the exclusion strategy.
        reserved_group_prefix: Group prefix of the runtime namespace.
        reserved_artifact_prefix: Artifact prefix of the runtime namespace.
        library_extensions: Extensions recognized as runtime libraries.
        library_packaging_types: Packaging types copied into the archive.
    """
    runtime_library_dir: str
    compiled_output_dir: str
    output_dir: str
    project_identifier: str
    runtime_home: str = ""
    exclusion_strategy: str = DEFAULT_EXCLUSION_STRATEGY
    reserved_group_prefix: str = DEFAULT_RESERVED_GROUP_PREFIX
    reserved_artifact_prefix: str = DEFAULT_RESERVED_ARTIFACT_PREFIX
    library_extensions: Tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_LIBRARY_EXTENSIONS)
    )
    library_packaging_types: Tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_LIBRARY_PACKAGING_TYPES)
    )

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "DeployConfig":
        """
        Build the immutable value from a validated configuration dictionary.

        Derives 'runtime_library_dir' from 'runtime_home' and 'output_dir'
        from 'build_directory' when they are not set explicitly.
        """
        runtime_home = cfg.get("runtime_home") or ""
        runtime_lib = cfg.get("runtime_library_dir") or ""
        if not runtime_lib and runtime_home:
            runtime_lib = os.path.join(runtime_home, "lib")

        output_dir = cfg.get("output_dir") or ""
        build_dir = cfg.get("build_directory") or ""
        if not output_dir:
            output_dir = os.path.join(build_dir or os.path.join(os.getcwd(), "target"), DEFAULT_OUTPUT_SUBDIR)

        return cls(
            runtime_library_dir=runtime_lib,
            compiled_output_dir=cfg.get("compiled_output_dir") or "",
            output_dir=output_dir,
            project_identifier=cfg.get("project_identifier") or "project",
            runtime_home=runtime_home,
            exclusion_strategy=cfg.get("exclusion_strategy") or DEFAULT_EXCLUSION_STRATEGY,
            reserved_group_prefix=cfg.get("reserved_group_prefix", DEFAULT_RESERVED_GROUP_PREFIX),
            reserved_artifact_prefix=cfg.get("reserved_artifact_prefix", DEFAULT_RESERVED_ARTIFACT_PREFIX),
            library_extensions=tuple(cfg.get("library_extensions") or DEFAULT_LIBRARY_EXTENSIONS),
            library_packaging_types=tuple(cfg.get("library_packaging_types") or DEFAULT_LIBRARY_PACKAGING_TYPES),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict view, lists instead of tuples, for JSON rendering."""
        out = asdict(self)
        out["library_extensions"] = list(self.library_extensions)
        out["library_packaging_types"] = list(self.library_packaging_types)
        return out

