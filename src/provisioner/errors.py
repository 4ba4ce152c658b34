# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Provisioner Error Classes.

All custom exceptions for clear error handling and exit codes.
Every error is fatal: the CLI prints one labelled line and exits.
Failures of child processes carry the child's own exit status.
"""

from __future__ import annotations

import enum
from typing import Sequence


class ExitCode(enum.IntEnum):
    """Standard exit codes for the provision command."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    KEYBOARD_INTERRUPT = 130


class ProvisionError(Exception):
    """Base exception for all provisioner errors."""

    exit_code: int = ExitCode.GENERIC_ERROR

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class NotRootError(ProvisionError):
    """The command was not started with root privileges."""

    def __init__(self) -> None:
        super().__init__("This script must be run with sudo or as root")


class UnsupportedOSError(ProvisionError):
    """The distribution does not map to a supported family."""


class ConfigError(ProvisionError):
    """The settings file could not be read or has the wrong shape."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid settings file {path}: {message}")


class UnknownOptionError(ProvisionError):
    """Unrecognised command-line option or missing option argument."""

    def __init__(self, message: str) -> None:
        super().__init__(f"{message} (use -h for help)")


class UnknownUserError(ProvisionError):
    """The user to elevate does not exist on this system."""

    def __init__(self, user: str) -> None:
        self.user = user
        super().__init__(f"User '{user}' does not exist")


class InvalidGrantSyntaxError(ProvisionError):
    """The sudoers checker rejected the grant file; the file was removed."""

    def __init__(self, path: str, details: str | None = None) -> None:
        self.path = path
        super().__init__("Invalid sudoers syntax - file removed", details)


class MissingFileError(ProvisionError):
    """A required input file is absent."""

    def __init__(self, kind: str, path: str) -> None:
        self.kind = kind
        self.path = path
        super().__init__(f"{kind} not found: {path}")


class FileAccessError(ProvisionError):
    """A host file could not be written, read or removed."""

    def __init__(self, action: str, path: str, error: OSError) -> None:
        self.action = action
        self.path = path
        super().__init__(f"Cannot {action} {path}: {error.strerror or error}")


class CommandFailedError(ProvisionError):
    """A child process exited non-zero; its status becomes our exit code."""

    def __init__(
        self,
        message: str,
        argv: Sequence[str],
        returncode: int,
        details: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        # A status of 0 would report success for a failed run.
        self.exit_code = returncode if returncode > 0 else ExitCode.GENERIC_ERROR
        super().__init__(f"{message} (exit status {returncode})", details)


class PackageManagerError(CommandFailedError):
    """The package manager returned a non-zero exit status."""


class ExternalToolFailure(CommandFailedError):
    """ansible-playbook returned a non-zero exit status."""
