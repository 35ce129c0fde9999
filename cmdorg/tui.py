"""
Full-screen command browser built on prompt_toolkit.

Layout:
    help text
    ┌ Executables ──────────────────────────────┐
    │ git  ls  ssh                              │
    ├ Alias list ┐┌ Command Description ────────┤
    │ > git_pull ││ Pulls changes               │
    │            │├ Command ────────────────────┤
    │            ││ git pull                    │
    └────────────┘└─────────────────────────────┘

Keys:
    q, Ctrl-C     quit
    Left/Right    switch executable tab (also h/l)
    Up/Down       move through the alias list (also k/j)
    Enter         copy the selected command to the clipboard

The browser only holds a ``NavigationState`` and swaps it for the result of
``apply`` on every key; the render helpers are plain functions of that state.
"""
import logging
from typing import Callable, List, Optional, Tuple

from prompt_toolkit.application import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension as D
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from cmdorg.clipboard import copy_to_clipboard
from cmdorg.errors import ClipboardError
from cmdorg.navigation import NavEvent, NavigationState, apply

logger = logging.getLogger(__name__)

StyleAndText = List[Tuple[str, str]]

HELP_LINES = [
    "Press q to exit",
    "Left and Right arrows to navigate through the executable tabs",
    "Up and Down arrows to navigate through the alias list",
    "Enter to copy the selected command to your clipboard",
]

STYLE = Style.from_dict({
    "help": "fg:ansiyellow",
    "tab": "fg:ansicyan",
    "tab.selected": "bold reverse",
    "alias.selected": "bold",
    "placeholder": "fg:ansibrightblack italic",
    "status": "fg:ansigreen",
    "status.error": "fg:ansired bold",
})


def render_help() -> StyleAndText:
    return [("class:help", "\n".join(HELP_LINES))]


def render_tabs(state: NavigationState) -> StyleAndText:
    """Tab bar: one entry per executable, the active one highlighted."""
    if state.is_empty:
        return [("class:placeholder", "No commands stored yet")]

    fragments: StyleAndText = []
    for index, title in enumerate(state.titles):
        style = "class:tab.selected" if index == state.tab_index else "class:tab"
        fragments.append((style, f" {title} "))
        fragments.append(("", " "))
    return fragments


def render_aliases(state: NavigationState) -> StyleAndText:
    """Aliases of the active tab, with a marker on the selected one."""
    fragments: StyleAndText = []
    for index, command in enumerate(state.active_commands):
        if index == state.item_index:
            fragments.append(("class:alias.selected", f"> {command.alias}\n"))
        else:
            fragments.append(("", f"  {command.alias}\n"))
    return fragments


def render_description(state: NavigationState) -> StyleAndText:
    command = state.selected_command
    if command is None:
        return [("class:placeholder", "Select a command with Up and Down")]
    return [("", command.description or "")]


def render_command(state: NavigationState) -> StyleAndText:
    command = state.selected_command
    if command is None:
        return []
    return [("", command.command)]


class CommandBrowser:
    """
    Interactive browser over a ``NavigationState``.

    Args:
        state: Initial navigation state
        exit_on_copy: Close the browser once Enter has copied a command
        copy: Clipboard writer, replaceable for tests
    """

    def __init__(self, state: NavigationState, exit_on_copy: bool = True,
                 copy: Callable[[str], None] = copy_to_clipboard):
        self.state = state
        self.exit_on_copy = exit_on_copy
        self.status = ""
        self.status_is_error = False
        self._copy = copy

    def handle(self, event: NavEvent):
        """Apply a navigation event and clear any status message."""
        self.state = apply(event, self.state)
        self._set_status("")

    def copy_selected(self) -> Optional[str]:
        """
        Copy the selected command's text to the clipboard.

        Returns:
            The copied text, or None if nothing was selected or copying failed
        """
        command = self.state.selected_command
        if command is None:
            self._set_status("No command selected")
            return None

        try:
            self._copy(command.command)
        except ClipboardError as e:
            logger.error("Encountered error while copying to clipboard: %s", e)
            self._set_status(str(e), error=True)
            return None

        logger.debug("Copied %r to the clipboard", command.command)
        self._set_status(f"Copied: {command.command}")
        return command.command

    def render_status(self) -> StyleAndText:
        style = "class:status.error" if self.status_is_error else "class:status"
        return [(style, self.status)]

    def _set_status(self, message: str, error: bool = False):
        self.status = message
        self.status_is_error = error

    def key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("q")
        @kb.add("c-c")
        def _quit(event):
            event.app.exit(result=None)

        @kb.add("right")
        @kb.add("l")
        def _next_tab(event):
            self.handle(NavEvent.NEXT_TAB)

        @kb.add("left")
        @kb.add("h")
        def _previous_tab(event):
            self.handle(NavEvent.PREVIOUS_TAB)

        @kb.add("down")
        @kb.add("j")
        def _next_item(event):
            self.handle(NavEvent.NEXT_ITEM)

        @kb.add("up")
        @kb.add("k")
        def _previous_item(event):
            self.handle(NavEvent.PREVIOUS_ITEM)

        @kb.add("enter")
        def _copy(event):
            copied = self.copy_selected()
            if copied is not None and self.exit_on_copy:
                event.app.exit(result=copied)

        return kb

    def create_layout(self) -> Layout:
        def text_window(render, **kwargs) -> Window:
            return Window(FormattedTextControl(render), wrap_lines=True, **kwargs)

        details = HSplit([
            Frame(text_window(lambda: render_description(self.state)),
                  title="Command Description", height=D(weight=3)),
            Frame(text_window(lambda: render_command(self.state)),
                  title="Command", height=D(weight=2)),
        ], width=D(weight=3))

        root = HSplit([
            text_window(render_help, height=len(HELP_LINES)),
            Frame(text_window(lambda: render_tabs(self.state), height=1), title="Executables"),
            VSplit([
                Frame(text_window(lambda: render_aliases(self.state)),
                      title="Alias list", width=D(weight=1)),
                details,
            ]),
            text_window(self.render_status, height=1),
        ])
        return Layout(root)

    def create_application(self, input=None, output=None) -> Application:
        return Application(
            layout=self.create_layout(),
            key_bindings=self.key_bindings(),
            style=STYLE,
            full_screen=True,
            input=input,
            output=output,
        )

    def run(self) -> Optional[str]:
        """
        Run until the user quits.

        Returns:
            The copied command text when Enter closed the browser, else None
        """
        return self.create_application().run()
