#!/usr/bin/env python3
"""
cmdorg - Command Organiser

Command-line interface for storing shell commands under short aliases and
browsing them by executable.
"""
import sys
import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cmdorg import __version__
from cmdorg.config import init_config, get_config
from cmdorg.errors import ImportFileError, NoExecutableError, ServiceError
from cmdorg.models import Command
from cmdorg.service import CommandService

logger = logging.getLogger(__name__)


console = Console()


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    """Configure the root logger once for the whole process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(levelname)s: %(message)s',
        filename=log_file,
        force=True,
    )


def open_service(args) -> CommandService:
    """Open the configured store, exiting with status 1 if it is unusable."""
    try:
        return CommandService.open()
    except ServiceError as e:
        logger.error("Failed to create the Command Service: %s", e)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


def format_command(command: Command, format: str = "plain") -> str:
    """Format a command for output."""
    if format == "json":
        return json.dumps(asdict(command))
    description = f"\n    {command.description}" if command.description else ""
    return f"[{command.alias}] {command.command}{description}"


def output_commands(commands: List[Command], format: str = "table"):
    """Output commands in the specified format."""
    if format == "table":
        table = Table(title="Commands")
        table.add_column("Alias", style="cyan")
        table.add_column("Executable", style="yellow")
        table.add_column("Command", style="green")
        table.add_column("Description", style="white")

        for command in commands:
            table.add_row(
                command.alias,
                command.executable,
                command.command,
                command.description or "",
            )

        console.print(table)
    elif format == "json":
        print(json.dumps([asdict(c) for c in commands], indent=2))
    else:  # plain
        for command in commands:
            print(format_command(command, "plain"))


def cmd_browse(args):
    """Open the interactive command browser."""
    from cmdorg.navigation import NavigationState
    from cmdorg.tui import CommandBrowser

    service = open_service(args)

    if getattr(args, "file", None):
        from cmdorg.importers import import_file
        try:
            import_file(service, args.file)
        except ImportFileError as e:
            logger.error("Failed to populate the db from file: %s", e)

    try:
        commands = service.get_all_commands()
    except ServiceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    config = get_config()
    browser = CommandBrowser(NavigationState.from_commands(commands), exit_on_copy=config.exit_on_copy)
    copied = browser.run()

    if copied and not args.quiet:
        console.print(f"[green]Copied to clipboard:[/green] {escape(copied)}")


def cmd_import(args):
    """Import commands from a TOML file."""
    from cmdorg.importers import import_file

    service = open_service(args)

    try:
        report = import_file(service, args.file)
    except ImportFileError as e:
        console.print(f"[red]Import error: {escape(str(e))}[/red]")
        sys.exit(1)

    if not args.quiet:
        for record, error in report.failures:
            console.print(f"[yellow]Skipped {record.label}: {escape(str(error))}[/yellow]")
        console.print(f"[green]Imported {len(report.inserted)} of {report.total} commands from {args.file}[/green]")


def prompt_for_command(args):
    """Fill in missing add arguments interactively."""
    from prompt_toolkit import prompt

    command = args.command or prompt("Command: ")
    alias = args.alias or prompt("Alias: ")
    description = args.description
    if description is None:
        description = prompt("Description (optional): ") or None
    return command, alias, description


def cmd_add(args):
    """Add a new command."""
    if args.interactive or not args.command or not args.alias:
        command, alias, description = prompt_for_command(args)
    else:
        command, alias, description = args.command, args.alias, args.description

    service = open_service(args)

    try:
        added = service.insert_command(command, alias, description)
    except NoExecutableError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except ServiceError as e:
        console.print(f"[red]Could not add {alias}: {escape(str(e))}[/red]")
        sys.exit(1)

    if args.quiet:
        print(added.alias)
    else:
        output_commands([added], args.output)


def cmd_list(args):
    """List stored commands."""
    service = open_service(args)

    if args.executable:
        commands = service.get_commands_by_executable(args.executable)
    else:
        commands = service.get_all_commands()

    if not commands:
        if not args.quiet:
            console.print("[yellow]No commands stored.[/yellow]")
        return

    output_commands(commands, args.output)


def cmd_get(args):
    """Get a specific command by its exact text."""
    service = open_service(args)

    try:
        command = service.get_command(args.command)
    except NoExecutableError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except ServiceError as e:
        if getattr(e, "not_found", False):
            console.print(f"[red]Command not found: {escape(args.command)}[/red]")
        else:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    output_commands([command], args.output)


def cmd_delete(args):
    """Delete commands by their exact text."""
    service = open_service(args)

    deleted_count = 0
    for text in args.commands:
        try:
            removed = service.delete_command(text)
        except ServiceError as e:
            console.print(f"[red]Could not delete {text!r}: {escape(str(e))}[/red]")
            continue

        if removed:
            deleted_count += 1
            if not args.quiet:
                console.print(f"[green]Deleted command: {escape(text)}[/green]")
        else:
            console.print(f"[yellow]Command not found: {escape(text)}[/yellow]")

    if args.quiet:
        print(deleted_count)


def cmd_info(args):
    """Show database information."""
    service = open_service(args)

    info = {
        "database": service.storage.url,
        "commands": service.count(),
        "executables": service.executables(),
    }

    if args.output == "json":
        print(json.dumps(info, indent=2))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan bold")
    table.add_column("Value", style="white")
    table.add_row("Database", info["database"])
    table.add_row("Commands", str(info["commands"]))
    table.add_row("Executables", ", ".join(info["executables"]) or "(none)")
    console.print(table)


def cmd_config(args):
    """Manage configuration."""
    config = get_config()

    if args.action == "show":
        if args.key:
            if args.key not in config.keys():
                console.print(f"[red]Unknown config key: {args.key}[/red]")
                sys.exit(1)
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "set":
        if not args.key or args.value is None:
            console.print("[red]Usage: cmdorg config set KEY VALUE[/red]")
            sys.exit(1)
        try:
            config.set_value(args.key, args.value)
        except KeyError:
            console.print(f"[red]Unknown config key: {args.key}[/red]")
            sys.exit(1)
        except ValueError as e:
            console.print(f"[red]Invalid value for {args.key}: {escape(str(e))}[/red]")
            sys.exit(1)
        config.save()
        if not args.quiet:
            console.print(f"[green]Set {args.key} = {args.value}[/green]")

    elif args.action == "init":
        config_path = config.save()
        console.print(f"[green]Created config at {config_path}[/green]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdorg",
        description="cmdorg - Command Organiser: bookmark shell commands under short aliases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cmdorg                                   # Browse stored commands
  cmdorg browse --file commands.toml       # Import, then browse
  cmdorg add "git pull" -a git_pull -d "Pulls changes"
  cmdorg add -i                            # Prompt for the fields
  cmdorg list --executable ls
  cmdorg get "git pull"
  cmdorg delete "git pull" "ls -a"
  cmdorg import commands.toml
  cmdorg info

Configuration:
  Default database: ./commands.db or from config
  Config file: ~/.config/cmdorg/config.toml
  Environment: CMDORG_DATABASE, CMDORG_LOG_LEVEL, CMDORG_EXIT_ON_COPY
        """
    )

    # Global options
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", help="Database file (default: commands.db)")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-o", "--output", choices=["table", "json", "plain"],
                        help="Output format")

    subparsers = parser.add_subparsers(dest="command_group", help="Commands")

    browse_parser = subparsers.add_parser("browse", help="Interactive command browser (default)")
    browse_parser.add_argument("-f", "--file", help="TOML file to import before browsing")
    browse_parser.set_defaults(func=cmd_browse)

    import_parser = subparsers.add_parser("import", help="Import commands from a TOML file")
    import_parser.add_argument("file", help="TOML file with a [[commands]] list")
    import_parser.set_defaults(func=cmd_import)

    add_parser = subparsers.add_parser("add", help="Add a command")
    add_parser.add_argument("command", nargs="?", help="Full command text")
    add_parser.add_argument("-a", "--alias", help="Unique alias")
    add_parser.add_argument("-d", "--description", help="Description")
    add_parser.add_argument("-i", "--interactive", action="store_true",
                            help="Prompt for the fields")
    add_parser.set_defaults(func=cmd_add)

    list_parser = subparsers.add_parser("list", help="List commands")
    list_parser.add_argument("-e", "--executable", help="Only commands of this executable")
    list_parser.set_defaults(func=cmd_list)

    get_parser = subparsers.add_parser("get", help="Show one command")
    get_parser.add_argument("command", help="Exact command text")
    get_parser.set_defaults(func=cmd_get)

    delete_parser = subparsers.add_parser("delete", help="Delete commands")
    delete_parser.add_argument("commands", nargs="+", help="Exact command text(s)")
    delete_parser.set_defaults(func=cmd_delete)

    info_parser = subparsers.add_parser("info", help="Show database information")
    info_parser.set_defaults(func=cmd_info)

    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("action", choices=["show", "set", "init"],
                               help="Config action")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("value", nargs="?", help="Config value (for set)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Without a sub-command, browse
    if not hasattr(args, "func"):
        args.func = cmd_browse
        args.file = None

    config_args = {}
    if args.output:
        config_args["output_format"] = args.output
    if args.config:
        config_args["config_file"] = Path(args.config)

    config = init_config(database=args.db, **config_args)

    if not args.output:
        args.output = config.output_format

    configure_logging("DEBUG" if args.verbose else config.log_level, config.log_file)
    logger.debug("Starting the command organiser...")

    try:
        args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except ServiceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
