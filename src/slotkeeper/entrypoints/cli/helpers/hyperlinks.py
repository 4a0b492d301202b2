"""OSC-8 hyperlink utilities for the SLOTKEEPER CLI.

Pure formatting: detect whether a stream is likely to render OSC-8 links and
wrap a URL accordingly.
"""

import os
import sys
from typing import TextIO

OSC8_TERMINALS = frozenset(
    {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}
)
OSC8_TERM_PREFIXES = ("alacritty", "konsole")


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether ``stream`` (default stdout) renders OSC-8.

    Non-TTY streams never do. Otherwise the terminal is matched against a
    short allowlist (``TERM_PROGRAM``, Windows Terminal, VTE, ``TERM``).
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(OSC8_TERM_PREFIXES)
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Render ``url`` as a clickable link, or as plain text when unsupported.

    Args:
        url: Target URL.
        label: Visible text; defaults to the URL itself.
    """
    label = label or url
    if not supports_osc8():
        return label if label == url else f"{label} ({url})"
    return f"\x1b]8;;{url}\x07{label}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL
