"""
Storage manager for cmdorg.

Owns the SQLAlchemy engine and its connection pool, defines the schema and
exposes CRUD operations keyed by command text. Rows are copied into
``Command`` values before they leave this module.
"""
import logging
from pathlib import Path
from typing import Optional, List, Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, select, delete, func, event, literal_column
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool
from sqlalchemy.exc import SQLAlchemyError

from cmdorg.config import get_config
from cmdorg.errors import (
    CommandNotFoundError,
    StorageInitError,
    StorageReadError,
    StorageWriteError,
)
from cmdorg.models import Base, Command, CommandRecord

logger = logging.getLogger(__name__)

# SQLite keeps rows in rowid order, which is insertion order for this table.
_SCAN_ORDER = literal_column("rowid")


class CommandStorage:
    """
    Durable persistence of Command records.

    Constructing an instance initializes the store: the database file and
    schema are created if absent, so it is safe to open an existing store.
    """

    def __init__(self, path: Optional[str] = None, url: Optional[str] = None):
        """
        Initialize database connection.

        Args:
            path: Database file path. Uses config default if not provided.
            url: Full SQLite URL (overrides path).

        Raises:
            StorageInitError: If the location is unwritable or the connection fails

        Examples:
            CommandStorage()  # Uses config default
            CommandStorage(path="commands.db")
            CommandStorage(url="sqlite:///commands.db")
        """
        config = get_config()

        if url:
            self.url = url
            self.path = None
        elif path:
            self.path = Path(path)
            self.url = f"sqlite:///{self.path}"
        else:
            self.path = config.get_database_path()
            self.url = config.get_database_url()

        try:
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)

            self.engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                poolclass=QueuePool,
                pool_size=config.connection_pool_size,
                max_overflow=0,  # Never more connections than the pool holds
                pool_timeout=config.connection_timeout,
                echo=config.database_echo
            )
            event.listen(self.engine, "connect", self._configure_sqlite)

            self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

            Base.metadata.create_all(self.engine)
        except (OSError, SQLAlchemyError) as e:
            raise StorageInitError(f"Failed to open the database at {self.url}", cause=e) from e

        logger.debug("Opened command store at %s", self.url)

    @staticmethod
    def _configure_sqlite(dbapi_conn, connection_record):
        """Configure SQLite connections."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode = WAL")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.close()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Yields:
            SQLAlchemy session with automatic commit/rollback
        """
        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """Dispose of the engine and every pooled connection."""
        self.engine.dispose()

    def insert_command(self, command: Command) -> None:
        """
        Write a new command row.

        Raises:
            StorageWriteError: On a duplicate command or alias, or I/O failure
        """
        try:
            with self.session() as session:
                session.add(CommandRecord.from_command(command))
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Failed to insert command {command.command!r}", cause=e) from e

        logger.debug("Inserted command %r as %r", command.command, command.alias)

    def get_all_commands(self) -> List[Command]:
        """
        Get every stored command in storage scan order.

        Returns:
            List of commands; empty when the store is empty
        """
        query = select(CommandRecord).order_by(_SCAN_ORDER)
        return self._fetch(query, "Failed to read commands")

    def get_commands_by_executable(self, executable: str) -> List[Command]:
        """Get the commands whose executable matches exactly."""
        query = (
            select(CommandRecord)
            .where(CommandRecord.executable == executable)
            .order_by(_SCAN_ORDER)
        )
        return self._fetch(query, f"Failed to read commands for {executable!r}")

    def get_command(self, command_text: str) -> Command:
        """
        Get the single command whose text exactly equals ``command_text``.

        Raises:
            CommandNotFoundError: If no row matches
            StorageReadError: On connectivity failure
        """
        query = select(CommandRecord).where(CommandRecord.command == command_text)
        found = self._fetch(query, f"Failed to read command {command_text!r}")
        if not found:
            raise CommandNotFoundError(command_text)
        return found[0]

    def delete_command(self, command_text: str) -> int:
        """
        Delete the row whose text exactly equals ``command_text``.

        Deleting a command that does not exist is not an error.

        Returns:
            Number of rows removed (0 or 1)

        Raises:
            StorageWriteError: On I/O failure
        """
        try:
            with self.session() as session:
                result = session.execute(
                    delete(CommandRecord).where(CommandRecord.command == command_text)
                )
                removed = result.rowcount
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Failed to delete command {command_text!r}", cause=e) from e

        logger.debug("Deleted %d row(s) for command %r", removed, command_text)
        return removed

    def count(self) -> int:
        """Number of stored commands."""
        try:
            with self.session() as session:
                return session.execute(select(func.count()).select_from(CommandRecord)).scalar_one()
        except SQLAlchemyError as e:
            raise StorageReadError("Failed to count commands", cause=e) from e

    def executables(self) -> List[str]:
        """Distinct executables in first-seen order."""
        seen = []
        for command in self.get_all_commands():
            if command.executable not in seen:
                seen.append(command.executable)
        return seen

    def _fetch(self, query, message: str) -> List[Command]:
        try:
            with self.session() as session:
                return [row.to_command() for row in session.execute(query).scalars()]
        except SQLAlchemyError as e:
            raise StorageReadError(message, cause=e) from e
