"""
Terminal handling.

Colour detection and ANSI helpers for the provisioning log lines.
"""

import os
import sys
from typing import Optional, TextIO


def is_tty(stream: Optional[TextIO] = None) -> bool:
    """Check if the given stream (or stdout) is a TTY."""
    if stream is None:
        stream = sys.stdout

    try:
        return stream.isatty()
    except AttributeError:
        return False


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """
    Check if the stream supports ANSI color codes.

    NO_COLOR always disables colour and FORCE_COLOR enables it even when
    the stream is not a terminal.
    """
    if stream is None:
        stream = sys.stdout

    if os.environ.get("NO_COLOR"):
        return False

    if os.environ.get("FORCE_COLOR"):
        return True

    if not is_tty(stream):
        return False

    term = os.environ.get("TERM", "")
    return term != "dumb"


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[0;31m"
    GREEN = "\033[0;32m"
    YELLOW = "\033[1;33m"
    BLUE = "\033[0;34m"


class ColorPrinter:
    """Helper class for colouring text written to one stream."""

    def __init__(self, stream: Optional[TextIO] = None, enabled: Optional[bool] = None):
        self.stream = stream or sys.stdout
        self.enabled = supports_color(self.stream) if enabled is None else enabled

    def _wrap(self, text: str, *codes: str) -> str:
        """Wrap text with color codes if enabled."""
        if not self.enabled:
            return text
        return "".join(codes) + text + Colors.RESET

    def red(self, text: str) -> str:
        return self._wrap(text, Colors.RED)

    def green(self, text: str) -> str:
        return self._wrap(text, Colors.GREEN)

    def yellow(self, text: str) -> str:
        return self._wrap(text, Colors.YELLOW)

    def blue(self, text: str) -> str:
        return self._wrap(text, Colors.BLUE)

    def bold(self, text: str) -> str:
        return self._wrap(text, Colors.BOLD)
