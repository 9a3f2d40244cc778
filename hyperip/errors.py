"""Project-specific exception types."""

from __future__ import annotations


class HyperIPError(RuntimeError):
    """Base error for domain-level hyperip failures."""

    exit_code = 1


class MissingParameterError(HyperIPError):
    """Raised when a value is absent from both the CLI and stored defaults."""

    exit_code = 2


class InvalidSettingsError(HyperIPError):
    """Raised when the settings file exists but has the wrong shape."""

    exit_code = 3


class InvalidTargetJSONError(HyperIPError):
    """Raised when the target file is not JSON or its root is not an object."""

    exit_code = 4


class IOFailureError(HyperIPError):
    """Raised when reading, writing, or creating a file fails."""

    exit_code = 5


class ExternalCommandError(HyperIPError):
    """Raised when the PowerShell query cannot be run or reports failure."""

    exit_code = 6
