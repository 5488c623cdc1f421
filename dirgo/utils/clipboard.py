"""Clipboard copy and the size/token status line."""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """Copy *text* to the system clipboard; ``False`` if no clipboard is available."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.debug("Clipboard copy failed: %s", exc)
        return False
    return True


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size}B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size / (1024 * 1024):.1f}MB"


def format_copy_status(size: int, tokens: int, copied: bool) -> str:
    label = f"{format_bytes(size)} · ~{tokens} tokens"
    if copied:
        return f"[copied {label}]"
    return f"[{label}]"
