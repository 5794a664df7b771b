from __future__ import annotations

"""
Deployment Error Taxonomy.

Defines the closed set of failure kinds an invocation can report, and the
exception types raised by the leaf components before the engine folds them
into a DeployResult.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed enumeration of terminal failure categories."""

    CONFIGURATION = "ConfigurationError"
    IO = "IOError"
    FILTER = "FilterError"


class DeployError(Exception):
    """
    Base class for failures raised inside the packaging core.

    Attributes:
        kind: Failure category reported to the caller.
        path: Offending filesystem path, when one is known.
    """

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigurationError(DeployError):
    """A required setting is missing or points to an unusable location."""

    kind = ErrorKind.CONFIGURATION


class FilterError(DeployError):
    """The runtime library directory could not be listed while filtering."""

    kind = ErrorKind.FILTER
