"""
Data models for cmdorg.

``Command`` is the value type handed to callers. ``CommandRecord`` is the
SQLAlchemy mapping of the single ``commands`` table; it never leaves the
storage layer.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


@dataclass(frozen=True)
class Command:
    """
    A stored shell command.

    Attributes:
        alias: Short unique name used for lookup and display
        executable: First whitespace-delimited token of ``command``
        command: Full command text; unique, and the key for get/delete
        description: Optional free text
    """
    alias: str
    executable: str
    command: str
    description: Optional[str] = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class CommandRecord(Base):
    """
    Row in the ``commands`` table.

    The command text is the primary key; there is no surrogate numeric id.
    Uniqueness is enforced on ``command`` and ``alias`` only, so several
    commands may share one executable.
    """
    __tablename__ = 'commands'

    command: Mapped[str] = mapped_column(String(250), primary_key=True)
    executable: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    alias: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @classmethod
    def from_command(cls, command: Command) -> "CommandRecord":
        return cls(
            command=command.command,
            executable=command.executable,
            alias=command.alias,
            description=command.description,
        )

    def to_command(self) -> Command:
        """Copy this row into a detached ``Command`` value."""
        return Command(
            alias=self.alias,
            executable=self.executable,
            command=self.command,
            description=self.description,
        )

    def __repr__(self) -> str:
        return f"<CommandRecord(alias='{self.alias}', command='{self.command}')>"
