"""
Error taxonomy for toolchain operations.

Two classes of failure reach the user:
- User input errors (bad version argument, version not in the inventory)
- Fatal errors (network, malformed index, inconsistent local state, extraction)

"Already downloaded" and "already active" are not errors; they are reported as
successful no-op results by the activation module.
"""

from __future__ import annotations


class ToolchainError(Exception):
    """
    Base exception for toolchain errors.

    Attributes:
        message: Human-readable error message
        remediation: Suggested fix for the error
        exit_code: Process exit code the CLI maps this error to
    """
    exit_code = 2

    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation
        super().__init__(message)


class UserInputError(ToolchainError):
    """Raised when the user asked for something the inventory cannot satisfy."""
    exit_code = 1


class InvalidVersionError(UserInputError):
    """Raised when a version argument cannot be parsed."""
    pass


class VersionNotFoundError(UserInputError):
    """Raised when a requested version (or master) is not in the inventory."""
    pass


class FatalError(ToolchainError):
    """Raised for unexpected conditions that abort the run."""
    exit_code = 2


class ConfigError(FatalError):
    """Raised when an explicitly requested configuration cannot be loaded."""
    pass


class UnsupportedHostError(FatalError):
    """Raised when the running OS/architecture has no published builds."""
    pass


class NetworkError(FatalError):
    """Raised when fetching the index or an archive fails."""
    pass


class IndexFormatError(FatalError):
    """Raised when the remote index is not in the expected format."""
    pass


class InconsistentStateError(FatalError):
    """Raised when the active install cannot be matched to any known version."""
    pass


class NotIndexedError(FatalError):
    """Raised when downloading a version that has no remote archive."""
    pass


class ExtractionError(FatalError):
    """Raised when unpacking an archive fails."""

    def __init__(self, message: str, output: str = "", remediation: str | None = None):
        self.output = output
        super().__init__(message, remediation)


class LinkError(FatalError):
    """Raised when the binary symlink cannot be replaced."""
    pass
