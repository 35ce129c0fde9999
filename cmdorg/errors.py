"""
Exception hierarchy for cmdorg.

Each layer has its own family of errors. A wrapping error keeps the
lower-layer exception on ``cause`` (and is raised ``from`` it), so callers
can inspect what actually went wrong instead of parsing a message string.

    CmdorgError
    ├── StorageError
    │   ├── StorageInitError
    │   ├── StorageWriteError
    │   └── StorageReadError
    │       └── CommandNotFoundError
    ├── ServiceError
    │   ├── ServiceValidationError
    │   │   └── NoExecutableError
    │   ├── ServiceInitError
    │   ├── ServiceInsertError
    │   ├── ServiceReadError
    │   └── ServiceDeleteError
    ├── ImportFileError
    └── ClipboardError
"""
from typing import Optional


class CmdorgError(Exception):
    """Base exception for all cmdorg errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


# ============================================================================
# Storage layer
# ============================================================================

class StorageError(CmdorgError):
    """Base exception for storage manager failures."""
    pass


class StorageInitError(StorageError):
    """Raised when the backing store cannot be created or opened."""
    pass


class StorageWriteError(StorageError):
    """Raised when an insert or delete violates a constraint or fails mid-write."""
    pass


class StorageReadError(StorageError):
    """Raised when commands cannot be read from the store."""
    pass


class CommandNotFoundError(StorageReadError):
    """Raised when no stored row matches the requested command text."""

    def __init__(self, command: str):
        super().__init__(f"Command not found: {command!r}")
        self.command = command


# ============================================================================
# Service layer
# ============================================================================

class ServiceError(CmdorgError):
    """Base exception for command service failures."""
    pass


class ServiceValidationError(ServiceError):
    """Raised when caller-supplied input is invalid."""
    pass


class NoExecutableError(ServiceValidationError):
    """Raised when the executable cannot be parsed out of the command text."""

    def __init__(self, command: str = ""):
        super().__init__("Unable to parse the executable out of the given command")
        self.command = command


class ServiceInitError(ServiceError):
    """Raised when the service cannot construct its storage manager."""
    pass


class ServiceInsertError(ServiceError):
    """Raised when inserting a command fails in storage."""
    pass


class ServiceReadError(ServiceError):
    """Raised when reading commands fails in storage."""

    @property
    def not_found(self) -> bool:
        """True when the underlying failure is a missing command."""
        return isinstance(self.cause, CommandNotFoundError)


class ServiceDeleteError(ServiceError):
    """Raised when deleting a command fails in storage."""
    pass


# ============================================================================
# Collaborators
# ============================================================================

class ImportFileError(CmdorgError):
    """Raised when a bulk import file cannot be read or parsed."""
    pass


class ClipboardError(CmdorgError):
    """Raised when the system clipboard is unavailable."""
    pass
