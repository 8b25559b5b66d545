"""Clipboard output sink for decrypted secrets.

Uses pyperclip for cross-platform clipboard access.
"""

from __future__ import annotations

import pyperclip

from sealbox.core.exceptions import SealBoxError


class ClipboardError(SealBoxError):
    # raised when no clipboard mechanism is available
    pass


def copy_to_clipboard(text: str) -> None:
    """Copy text to the system clipboard.

    Args:
        text: The text to copy.

    Raises:
        ClipboardError: If clipboard access fails.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"clipboard unavailable: {exc}") from exc
