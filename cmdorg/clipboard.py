"""
System clipboard access.
"""
import pyperclip

from cmdorg.errors import ClipboardError


def copy_to_clipboard(text: str) -> None:
    """
    Put ``text`` on the system clipboard.

    Raises:
        ClipboardError: If no clipboard mechanism is available
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError("Failed to copy to the clipboard", cause=e) from e
