from __future__ import annotations

from typing import Dict, List, Type

from .base import ExclusionStrategy
from .base_name import BaseNameStrategy
from .file_name import FileNameStrategy

_STRATEGIES: Dict[str, Type[ExclusionStrategy]] = {
    BaseNameStrategy.name: BaseNameStrategy,
    FileNameStrategy.name: FileNameStrategy,
}


def available_strategies() -> List[str]:
    """Registered strategy names, sorted."""
    return sorted(_STRATEGIES)


def get_strategy(name: str) -> ExclusionStrategy:
    """
    Instantiate a registered exclusion strategy.

    Raises:
        KeyError: If no strategy is registered under that name.
    """
    try:
        return _STRATEGIES[name]()
    except KeyError:
        raise KeyError(
            f"Unknown exclusion strategy '{name}'. Available: {', '.join(available_strategies())}"
        ) from None


__all__ = [
    "ExclusionStrategy",
    "BaseNameStrategy",
    "FileNameStrategy",
    "available_strategies",
    "get_strategy",
]
