"""Exception hierarchy for OpenAPI update runs."""

from __future__ import annotations


class UpdateError(Exception):
    """Base exception for update failures."""

    pass


class CommandFailedError(UpdateError):
    """An external command exited with a non-zero status.

    Raised by the live system utilities; the orchestrator lets it propagate
    so the run stops at the first failing command.
    """

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed (exit {returncode}): {' '.join(self.command)}"
        detail = stderr.strip()
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class ConversionError(UpdateError):
    """A copied document could not be parsed as YAML."""

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"Failed to convert {document} to JSON: {reason}")
