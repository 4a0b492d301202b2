"""CLI helpers for SLOTKEEPER.

Utilities used by the command-line interface: URL sanitization and schedule
rendering for display, OSC-8 terminal hyperlinks when supported, Click
parameter types for dates and times, and message emitters that write to
stderr with emoji→ASCII fallbacks.
"""

from .formatting import DATE, TIME, render_page, sanitize_url
from .hyperlinks import hyperlink
from .messages import error, success, warn

__all__ = [
    "DATE",
    "TIME",
    "error",
    "hyperlink",
    "render_page",
    "sanitize_url",
    "success",
    "warn",
]
