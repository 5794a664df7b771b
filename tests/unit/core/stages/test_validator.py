from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Default value injection.
2. Path normalization and list coercion.
3. Strategy and extension sanitation.
4. Strict mode validation.
"""

import os

import pytest

from hdeploy.core.pipeline.stages.validator import validate_config


def test_validate_none_returns_defaults() -> None:
    """Passing None should return the full default configuration."""
    cfg, warnings = validate_config(None)

    assert isinstance(cfg, dict)
    assert cfg["exclusion_strategy"] == "base-name"
    assert cfg["library_extensions"] == [".jar"]
    assert len(warnings) > 0


def test_validate_empty_dict_returns_defaults() -> None:
    cfg, warnings = validate_config({})

    assert cfg["runtime_home"] == ""
    assert cfg["compiled_output_dir"] == ""
    assert cfg["reserved_group_prefix"] == "org.apache"
    assert cfg["library_packaging_types"] == ["jar"]
    assert warnings == []


def test_paths_are_normalized_to_absolute(tmp_path) -> None:
    relative = os.path.relpath(str(tmp_path / "hadoop"))
    cfg, _ = validate_config({"runtime_home": relative, "output_dir": "  "})

    assert cfg["runtime_home"] == str(tmp_path / "hadoop")
    assert cfg["output_dir"] == ""


def test_user_home_is_expanded() -> None:
    cfg, _ = validate_config({"runtime_library_dir": "~/hadoop/lib"})
    assert cfg["runtime_library_dir"] == os.path.join(os.path.expanduser("~"), "hadoop", "lib")


def test_csv_lists_are_converted() -> None:
    cfg, warnings = validate_config({"library_packaging_types": "jar, bundle"})

    assert cfg["library_packaging_types"] == ["jar", "bundle"]
    assert any("CSV" in w for w in warnings)


def test_extensions_get_dot_prefix() -> None:
    cfg, warnings = validate_config({"library_extensions": ["jar", ".zip"]})

    assert cfg["library_extensions"] == [".jar", ".zip"]
    assert any("corrected" in w for w in warnings)


def test_unknown_strategy_falls_back_to_default() -> None:
    cfg, warnings = validate_config({"exclusion_strategy": "fuzzy"})

    assert cfg["exclusion_strategy"] == "base-name"
    assert any("fuzzy" in w for w in warnings)


def test_invalid_types_use_fallback() -> None:
    cfg, warnings = validate_config({"project_identifier": 42, "library_extensions": 7})

    assert cfg["project_identifier"] == ""
    assert cfg["library_extensions"] == [".jar"]
    assert len(warnings) == 2


def test_explicit_empty_reserved_prefix_is_kept() -> None:
    """An empty prefix disables the reserved-namespace rule instead of reverting."""
    cfg, warnings = validate_config({"reserved_group_prefix": "", "reserved_artifact_prefix": "   "})

    assert cfg["reserved_group_prefix"] == ""
    assert cfg["reserved_artifact_prefix"] == ""
    assert warnings == []


def test_missing_reserved_prefix_uses_default() -> None:
    cfg, _ = validate_config({"reserved_group_prefix": None})

    assert cfg["reserved_group_prefix"] == "org.apache"
    assert cfg["reserved_artifact_prefix"] == "hadoop"


def test_strict_mode_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("not a dict", strict=True)

    with pytest.raises(TypeError):
        validate_config({"runtime_home": 1}, strict=True)

    with pytest.raises(ValueError):
        validate_config({"exclusion_strategy": "fuzzy"}, strict=True)

    with pytest.raises(ValueError):
        validate_config({"library_extensions": ["jar"]}, strict=True)
