# Copyright (c) 2024 Workstation Provisioner Contributors
# MIT License

"""
Leveled console output.

Progress goes to stdout as ``[INFO]``, ``[OK]`` and ``[WARN]`` lines;
failures go to stderr as ``[ERROR]``.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from provisioner.platform.tty import ColorPrinter


class Console:
    """Writes labelled, optionally coloured status lines."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        color: Optional[bool] = None,
        verbose: bool = False,
    ) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self._out_colors = ColorPrinter(self.out, enabled=color)
        self._err_colors = ColorPrinter(self.err, enabled=color)
        self.verbose = verbose

    def _emit(self, stream: TextIO, text: str) -> None:
        print(text, file=stream, flush=True)

    def info(self, message: str) -> None:
        self._emit(self.out, f"{self._out_colors.blue('[INFO]')} {message}")

    def success(self, message: str) -> None:
        self._emit(self.out, f"{self._out_colors.green('[OK]')} {message}")

    def warn(self, message: str) -> None:
        self._emit(self.out, f"{self._out_colors.yellow('[WARN]')} {message}")

    def error(self, message: str) -> None:
        self._emit(self.err, f"{self._err_colors.red('[ERROR]')} {message}")

    def command(self, text: str) -> None:
        """Echo a command line about to run (verbose only)."""
        if self.verbose:
            self.info(f"$ {text}")

    def line(self, text: str = "") -> None:
        self._emit(self.out, text)

    def blank(self) -> None:
        self.line()

    def banner(self, title: str) -> None:
        rule = "=" * 42
        self.blank()
        self.line(rule)
        self.line(f"  {title}")
        self.line(rule)
        self.blank()
