"""
Navigation state for the command browser.

Commands are grouped into one tab per executable. The state records which
tab is active and which item (if any) is selected inside it. States are
immutable: every transition returns a new ``NavigationState``, so the
transitions can be exercised without any terminal attached.

Empty collections are valid states. Moving between tabs when there are
none, or between items of an empty tab, leaves the state unchanged.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from cmdorg.models import Command


@dataclass(frozen=True)
class Tab:
    """Commands sharing one executable, in storage order."""
    executable: str
    commands: Tuple[Command, ...] = ()

    def __len__(self) -> int:
        return len(self.commands)


def group_by_executable(commands: Iterable[Command]) -> Tuple[Tab, ...]:
    """
    Partition commands into tabs by executable.

    Tabs are ordered by the first occurrence of each executable and the
    commands inside a tab keep their input order; nothing is re-sorted.
    """
    groups: Dict[str, List[Command]] = {}
    for command in commands:
        groups.setdefault(command.executable, []).append(command)
    return tuple(Tab(executable, tuple(items)) for executable, items in groups.items())


class NavEvent(Enum):
    """Navigation events forwarded by the view."""
    NEXT_TAB = "next_tab"
    PREVIOUS_TAB = "previous_tab"
    NEXT_ITEM = "next_item"
    PREVIOUS_ITEM = "previous_item"


@dataclass(frozen=True)
class NavigationState:
    """
    Selected tab and selected item within it.

    Attributes:
        tabs: Ordered tabs, one per executable
        tab_index: Index of the active tab (0 when there are no tabs)
        item_index: Index into the active tab's commands, or None
    """
    tabs: Tuple[Tab, ...] = ()
    tab_index: int = 0
    item_index: Optional[int] = None

    @classmethod
    def from_commands(cls, commands: Iterable[Command]) -> "NavigationState":
        return cls(tabs=group_by_executable(commands))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.tabs

    @property
    def titles(self) -> List[str]:
        return [tab.executable for tab in self.tabs]

    @property
    def active_tab(self) -> Optional[Tab]:
        if self.is_empty:
            return None
        return self.tabs[self.tab_index]

    @property
    def active_commands(self) -> Tuple[Command, ...]:
        tab = self.active_tab
        return tab.commands if tab else ()

    @property
    def selected_command(self) -> Optional[Command]:
        """The highlighted command, or None if nothing is selected."""
        commands = self.active_commands
        if self.item_index is None or not 0 <= self.item_index < len(commands):
            return None
        return commands[self.item_index]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def next_tab(self) -> "NavigationState":
        return self._move_tab(1)

    def previous_tab(self) -> "NavigationState":
        return self._move_tab(-1)

    def select_tab(self, executable: str) -> "NavigationState":
        """
        Activate the tab for ``executable``.

        Raises:
            KeyError: If no tab has that executable
        """
        titles = self.titles
        if executable not in titles:
            raise KeyError(executable)
        return replace(self, tab_index=titles.index(executable), item_index=None)

    def next_item(self) -> "NavigationState":
        count = len(self.active_commands)
        if not count:
            return self
        if self.item_index is None:
            return replace(self, item_index=0)
        return replace(self, item_index=(self.item_index + 1) % count)

    def previous_item(self) -> "NavigationState":
        count = len(self.active_commands)
        if not count:
            return self
        if self.item_index is None:
            return replace(self, item_index=count - 1)
        return replace(self, item_index=(self.item_index - 1) % count)

    def select_item(self, index: int) -> "NavigationState":
        """
        Select the item at ``index`` in the active tab.

        Raises:
            IndexError: If ``index`` is outside the active tab
        """
        if not 0 <= index < len(self.active_commands):
            raise IndexError(index)
        return replace(self, item_index=index)

    def _move_tab(self, step: int) -> "NavigationState":
        if self.is_empty:
            return self
        # Selection never carries over to another tab
        return replace(self, tab_index=(self.tab_index + step) % len(self.tabs), item_index=None)


_TRANSITIONS = {
    NavEvent.NEXT_TAB: NavigationState.next_tab,
    NavEvent.PREVIOUS_TAB: NavigationState.previous_tab,
    NavEvent.NEXT_ITEM: NavigationState.next_item,
    NavEvent.PREVIOUS_ITEM: NavigationState.previous_item,
}


def apply(event: NavEvent, state: NavigationState) -> NavigationState:
    """Return the state that follows ``state`` after ``event``."""
    return _TRANSITIONS[event](state)
