from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (JSON file, command
line) and the immutable DeployConfig. Handles type coercion, path
normalization and default value injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from hdeploy.core.filtering.strategies import available_strategies
from hdeploy.domain.config import get_default_config
from hdeploy.domain.constants import DEFAULT_EXCLUSION_STRATEGY
from hdeploy.infra.fs import normalize_path

logger = logging.getLogger(__name__)

_STRING_FIELDS = ["project_identifier", "exclusion_strategy"]

# An explicit empty prefix disables the reserved-namespace exclusion rule
_PREFIX_FIELDS = ["reserved_group_prefix", "reserved_artifact_prefix"]

_PATH_FIELDS = [
    "runtime_home", "runtime_library_dir", "build_directory",
    "compiled_output_dir", "output_dir",
]

_LIST_FIELDS = ["library_extensions", "library_packaging_types"]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Missing keys are filled with defaults. Non-empty path fields are expanded
    to absolute paths; empty ones stay empty so that required-setting checks
    happen in the engine, before any filesystem mutation.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults.get(field, ""), field, warnings, strict)

    for field in _PREFIX_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict, allow_empty=True)

    for field in _PATH_FIELDS:
        raw = _as_str(merged.get(field), "", field, warnings, strict)
        merged[field] = normalize_path(raw, "") if raw else ""

    for field in _LIST_FIELDS:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["library_extensions"] = _normalize_extensions(merged["library_extensions"], warnings, strict)
    merged["exclusion_strategy"] = _check_strategy(merged["exclusion_strategy"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        allow_empty: bool = False,
) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v or allow_empty else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extensions(exts: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Ensure library extensions are dot-prefixed."""
    out: List[str] = []
    for ext in exts:
        e = ext.strip()
        if not e:
            continue
        if not e.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{e}'.")
            e = "." + e
        out.append(e)
    return out if out else list(get_default_config()["library_extensions"])


def _check_strategy(name: str, warnings: List[str], strict: bool) -> str:
    """Reject exclusion strategies that are not registered."""
    if name in available_strategies():
        return name
    msg = f"Unknown exclusion strategy '{name}'. Available: {', '.join(available_strategies())}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{DEFAULT_EXCLUSION_STRATEGY}'.")
    return DEFAULT_EXCLUSION_STRATEGY
