"""
cmdorg - Command Organiser

A personal command-bookmark manager: shell commands are stored under short
aliases in a local SQLite database and browsed in a terminal UI, one tab per
executable, with the selected command copied to the clipboard.

Example Usage:
    >>> from cmdorg import CommandService, NavigationState
    >>> service = CommandService.open(path="commands.db")
    >>> added = service.insert_command("git pull", "git_pull", "Pulls changes")
    >>> state = NavigationState.from_commands(service.get_all_commands())
    >>> state.next_item().selected_command.command
    'git pull'
"""

__version__ = "0.1.0"

# Storage and service
from cmdorg.db import CommandStorage
from cmdorg.service import CommandService, derive_executable

# Configuration
from cmdorg.config import CmdorgConfig, get_config, init_config

# Models and navigation
from cmdorg.models import Command
from cmdorg.navigation import NavEvent, NavigationState, Tab, apply, group_by_executable

# Errors
from cmdorg.errors import (
    CmdorgError,
    CommandNotFoundError,
    NoExecutableError,
    ServiceError,
    ServiceReadError,
    StorageError,
)

__all__ = [
    # Storage and service
    "CommandStorage",
    "CommandService",
    "derive_executable",
    # Config
    "CmdorgConfig",
    "get_config",
    "init_config",
    # Models and navigation
    "Command",
    "NavEvent",
    "NavigationState",
    "Tab",
    "apply",
    "group_by_executable",
    # Errors
    "CmdorgError",
    "CommandNotFoundError",
    "NoExecutableError",
    "ServiceError",
    "ServiceReadError",
    "StorageError",
]
