"""
Tests for cmdorg/tui.py

The full-screen application is never run; the render helpers, the browser's
event handling and its key bindings are exercised directly.
"""
from unittest.mock import Mock

import pytest
from prompt_toolkit.application import Application
from prompt_toolkit.input import DummyInput
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import DummyOutput

from cmdorg.errors import ClipboardError
from cmdorg.navigation import NavEvent, NavigationState
from cmdorg.tui import (
    HELP_LINES,
    CommandBrowser,
    render_aliases,
    render_command,
    render_description,
    render_help,
    render_tabs,
)


def text_of(fragments):
    return "".join(text for _, text in fragments)


@pytest.fixture
def state(sample_commands):
    return NavigationState.from_commands(sample_commands)


@pytest.fixture
def copied():
    return []


@pytest.fixture
def browser(state, copied):
    return CommandBrowser(state, copy=copied.append)


def press(browser, key):
    """Invoke the handler bound to ``key`` with a fake event."""
    event = Mock()
    bindings = browser.key_bindings().get_bindings_for_keys((key,))
    bindings[-1].handler(event)
    return event


class TestRendering:
    """Test the render helpers."""

    def test_help(self):
        """All help lines are shown."""
        assert text_of(render_help()).splitlines() == HELP_LINES

    def test_tabs_highlight_active(self, state):
        """The active tab uses the selected style."""
        fragments = render_tabs(state.next_tab())
        selected = [text for style, text in fragments if style == "class:tab.selected"]

        assert selected == [" ls "]
        assert "git" in text_of(fragments)

    def test_tabs_placeholder_when_empty(self):
        """An empty store shows a placeholder."""
        assert "No commands stored" in text_of(render_tabs(NavigationState()))

    def test_aliases_mark_selection(self, state):
        """The selected alias gets a marker."""
        text = text_of(render_aliases(state.next_tab().next_item().next_item()))

        assert text.splitlines() == ["  ls_current", "> ls_all", "  ls_previous", "  ls_version"]

    def test_details_without_selection(self, state):
        """Description shows a hint and the command pane is blank."""
        assert "Select a command" in text_of(render_description(state))
        assert render_command(state) == []

    def test_details_with_selection(self, state):
        """Description and command follow the selection."""
        selected = state.next_item()

        assert text_of(render_description(selected)) == "Pulls changes"
        assert text_of(render_command(selected)) == "git pull"

    def test_missing_description_is_blank(self, state):
        """Commands without a description render an empty pane."""
        selected = state.select_tab("ls").select_item(3)
        assert text_of(render_description(selected)) == ""


class TestCommandBrowser:
    """Test CommandBrowser state handling."""

    def test_handle_applies_event(self, browser):
        """Events replace the held state."""
        browser.handle(NavEvent.NEXT_TAB)
        browser.handle(NavEvent.PREVIOUS_ITEM)

        assert browser.state.selected_command.alias == "ls_version"

    def test_copy_selected(self, browser, copied):
        """The selected command's text goes to the clipboard."""
        browser.handle(NavEvent.NEXT_ITEM)

        assert browser.copy_selected() == "git pull"
        assert copied == ["git pull"]
        assert browser.status == "Copied: git pull"

    def test_copy_without_selection(self, browser, copied):
        """Nothing is copied when nothing is selected."""
        assert browser.copy_selected() is None
        assert copied == []
        assert browser.status == "No command selected"

    def test_copy_failure_sets_error_status(self, state, caplog):
        """Clipboard errors are logged and shown, not raised."""
        copy = Mock(side_effect=ClipboardError("Could not copy to clipboard"))
        browser = CommandBrowser(state.next_item(), copy=copy)

        assert browser.copy_selected() is None
        assert browser.status_is_error
        assert "Could not copy to clipboard" in caplog.text
        assert browser.render_status()[0][0] == "class:status.error"

    def test_navigation_clears_status(self, browser):
        """Moving after a copy clears the message."""
        browser.handle(NavEvent.NEXT_ITEM)
        browser.copy_selected()
        browser.handle(NavEvent.NEXT_TAB)

        assert browser.status == ""


class TestKeyBindings:
    """Test the key bindings."""

    @pytest.mark.parametrize("key,tab", [(Keys.Right, "ls"), ("l", "ls"), (Keys.Left, "ls"), ("h", "ls")])
    def test_tab_keys(self, browser, key, tab):
        """Left and right switch tabs; with two tabs both land on ls."""
        press(browser, key)
        assert browser.state.active_tab.executable == tab

    @pytest.mark.parametrize("key,index", [(Keys.Down, 0), ("j", 0), (Keys.Up, 3), ("k", 3)])
    def test_item_keys(self, browser, key, index):
        """Up and down move through the alias list."""
        browser.handle(NavEvent.NEXT_TAB)
        press(browser, key)
        assert browser.state.item_index == index

    @pytest.mark.parametrize("key", ["q", Keys.ControlC])
    def test_quit_keys(self, browser, key):
        """q and Ctrl-C exit without a result."""
        event = press(browser, key)
        event.app.exit.assert_called_once_with(result=None)

    def test_enter_copies_and_exits(self, browser, copied):
        """Enter copies and closes the browser with the copied text."""
        browser.handle(NavEvent.NEXT_ITEM)
        event = press(browser, Keys.ControlM)

        assert copied == ["git pull"]
        event.app.exit.assert_called_once_with(result="git pull")

    def test_enter_stays_open_when_configured(self, state, copied):
        """exit_on_copy=False keeps the browser running."""
        browser = CommandBrowser(state.next_item(), exit_on_copy=False, copy=copied.append)
        event = press(browser, Keys.ControlM)

        assert copied == ["git pull"]
        event.app.exit.assert_not_called()

    def test_enter_without_selection_stays_open(self, browser):
        """Nothing selected, nothing to exit with."""
        event = press(browser, Keys.ControlM)
        event.app.exit.assert_not_called()


class TestApplication:
    """Test building the prompt_toolkit application."""

    def test_create_application(self, browser):
        """The application builds with dummy terminal I/O."""
        app = browser.create_application(input=DummyInput(), output=DummyOutput())

        assert isinstance(app, Application)
        assert app.full_screen

    def test_empty_state_builds(self):
        """An empty store still produces a layout."""
        app = CommandBrowser(NavigationState()).create_application(
            input=DummyInput(), output=DummyOutput()
        )
        assert app.layout is not None
