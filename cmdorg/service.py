"""
Command service.

Derives the executable from raw command text and presents a typed API over
the storage manager. Storage failures are translated into service errors
that keep the storage error as their cause.
"""
import logging
from typing import List, Optional

from cmdorg.db import CommandStorage
from cmdorg.errors import (
    NoExecutableError,
    ServiceDeleteError,
    ServiceInitError,
    ServiceInsertError,
    ServiceReadError,
    StorageError,
    StorageInitError,
)
from cmdorg.models import Command

logger = logging.getLogger(__name__)


def derive_executable(command: str) -> str:
    """
    Return the first whitespace-delimited token of ``command``.

    Raises:
        NoExecutableError: If ``command`` contains no tokens
    """
    tokens = command.split()
    if not tokens:
        raise NoExecutableError(command)
    return tokens[0]


class CommandService:
    """Friendly API over a ``CommandStorage``."""

    def __init__(self, storage: CommandStorage):
        self.storage = storage

    @classmethod
    def open(cls, path: Optional[str] = None, url: Optional[str] = None) -> "CommandService":
        """
        Open the storage at ``path``/``url`` and wrap it in a service.

        Raises:
            ServiceInitError: If the storage manager cannot be constructed
        """
        try:
            storage = CommandStorage(path=path, url=url)
        except StorageInitError as e:
            raise ServiceInitError("Failed to construct the storage manager", cause=e) from e
        return cls(storage)

    def insert_command(self, command: str, alias: str, description: Optional[str] = None) -> Command:
        """
        Store a new command.

        Args:
            command: Full command text as the user would type it
            alias: Unique short name
            description: Optional free text

        Returns:
            The stored command

        Raises:
            NoExecutableError: If ``command`` is empty
            ServiceInsertError: If storage rejects the insert
        """
        executable = derive_executable(command)
        new_command = Command(
            alias=alias,
            executable=executable,
            command=command,
            description=description,
        )
        try:
            self.storage.insert_command(new_command)
        except StorageError as e:
            raise ServiceInsertError("Failed to insert a command", cause=e) from e

        logger.info("Stored %r as %s", command, alias)
        return new_command

    def get_all_commands(self) -> List[Command]:
        try:
            return self.storage.get_all_commands()
        except StorageError as e:
            raise ServiceReadError("Failed to read the commands", cause=e) from e

    def get_commands_by_executable(self, executable: str) -> List[Command]:
        try:
            return self.storage.get_commands_by_executable(executable)
        except StorageError as e:
            raise ServiceReadError(f"Failed to read the {executable} commands", cause=e) from e

    def count(self) -> int:
        try:
            return self.storage.count()
        except StorageError as e:
            raise ServiceReadError("Failed to count the commands", cause=e) from e

    def executables(self) -> List[str]:
        """Distinct executables in the order they were first stored."""
        try:
            return self.storage.executables()
        except StorageError as e:
            raise ServiceReadError("Failed to read the executables", cause=e) from e

    def get_command(self, command: str, alias: Optional[str] = None) -> Command:
        """
        Look up a command by its exact text.

        ``alias`` is accepted for symmetry with ``insert_command``; the
        lookup key is always the command text.

        Raises:
            NoExecutableError: If ``command`` is empty
            ServiceReadError: If the command is missing (``not_found``) or storage fails
        """
        derive_executable(command)
        try:
            return self.storage.get_command(command)
        except StorageError as e:
            raise ServiceReadError("Failed to get the command", cause=e) from e

    def delete_command(self, command: str, alias: Optional[str] = None,
                       description: Optional[str] = None) -> int:
        """
        Delete a command by its exact text.

        Deleting a command that is not stored succeeds and returns 0.

        Returns:
            Number of rows removed

        Raises:
            NoExecutableError: If ``command`` is empty
            ServiceDeleteError: If storage fails
        """
        derive_executable(command)
        try:
            removed = self.storage.delete_command(command)
        except StorageError as e:
            raise ServiceDeleteError("Failed to delete the command", cause=e) from e

        if removed:
            logger.info("Deleted %r", command)
        return removed
