"""Operator tooling exceptions."""


class OpsError(Exception):
    """Base exception for operator tooling errors."""
    pass


class PrerequisiteError(OpsError):
    """Raised when a required tool, file, version or environment is missing."""
    pass


class CommandFailedError(OpsError):
    """Raised when a delegated command exits nonzero."""

    def __init__(self, message: str, command: list[str] | None = None, return_code: int | None = None):
        super().__init__(message)
        self.command = command or []
        self.return_code = return_code
