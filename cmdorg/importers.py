"""
Bulk import of commands from a TOML file.

The file holds a top-level ``commands`` array of tables:

    [[commands]]
    command = "git pull"
    alias = "git_pull"
    description = "Pulls changes"

Reading the file is all-or-nothing; inserting is per record. A record that
cannot be stored is logged and reported, and the batch carries on.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import tomli

from cmdorg.errors import CmdorgError, ImportFileError
from cmdorg.models import Command

logger = logging.getLogger(__name__)


@dataclass
class ImportRecord:
    """One entry of an import file, as written by the user."""
    command: Optional[str]
    alias: Optional[str]
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportRecord":
        return cls(
            command=data.get("command"),
            alias=data.get("alias"),
            description=data.get("description"),
        )

    @property
    def label(self) -> str:
        for value in (self.alias, self.command):
            if isinstance(value, str) and value:
                return value
        return "<unnamed>"

    def check(self):
        """
        Raises:
            ImportFileError: If a field is missing or is not a string
        """
        if not self.command or not self.alias:
            raise ImportFileError("Record needs both 'command' and 'alias'")
        for name in ("command", "alias", "description"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ImportFileError(f"'{name}' must be a string, got {type(value).__name__}")


@dataclass
class ImportReport:
    """Outcome of an import batch."""
    inserted: List[Command] = field(default_factory=list)
    failures: List[Tuple[ImportRecord, Exception]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inserted) + len(self.failures)


def read_commands_from_file(path: Union[str, Path]) -> List[ImportRecord]:
    """
    Parse an import file.

    Args:
        path: Path to the TOML file

    Returns:
        Records in file order

    Raises:
        ImportFileError: If the path is not a file, the TOML is invalid,
            or there is no ``commands`` list
    """
    path = Path(path)
    if not path.is_file():
        raise ImportFileError(f"Path is not a file: {path}")

    logger.debug("Parsing the file: %s", path)

    try:
        with open(path, "rb") as f:
            data = tomli.load(f)
    except OSError as e:
        raise ImportFileError(f"Failed to read the contents from {path}", cause=e) from e
    except tomli.TOMLDecodeError as e:
        raise ImportFileError(f"Failed to deserialise the commands from {path}", cause=e) from e

    entries = data.get("commands")
    if not isinstance(entries, list):
        raise ImportFileError(f"No 'commands' list found in {path}")

    return [ImportRecord.from_dict(entry) if isinstance(entry, dict) else ImportRecord(None, None)
            for entry in entries]


def import_commands(service, records: List[ImportRecord]) -> ImportReport:
    """
    Insert records through ``service``, continuing past failures.

    Args:
        service: A ``CommandService``
        records: Records to insert

    Returns:
        Report of inserted commands and per-record failures
    """
    report = ImportReport()

    for record in records:
        try:
            record.check()
            inserted = service.insert_command(record.command, record.alias, record.description)
        except CmdorgError as e:
            logger.warning("Could not insert command %s because: %s", record.label, e)
            report.failures.append((record, e))
        else:
            report.inserted.append(inserted)

    logger.info("Imported %d of %d commands", len(report.inserted), report.total)
    return report


def import_file(service, path: Union[str, Path]) -> ImportReport:
    """Read ``path`` and insert its records through ``service``."""
    logger.info("Populating the db from input file: %s", path)
    return import_commands(service, read_commands_from_file(path))
