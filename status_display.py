#!/usr/bin/env python3
"""
Console output for the reminder job
Progress and notices go to stdout, errors to stderr, both through rich
"""

from typing import Optional

from rich.console import Console


class StatusDisplay:
    """Handle status updates and error reporting with rich"""

    def __init__(self, quiet: bool = False, console: Optional[Console] = None,
                 error_console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def update(self, message: str, style: str = "cyan"):
        """Show a progress message (suppressed in quiet mode)"""
        if not self.quiet:
            self.console.print(message, style=style)

    def print(self, message: str, style: Optional[str] = None):
        """Print a message that should always be shown"""
        self.console.print(message, style=style)

    def raw(self, text: str):
        """Print text verbatim, with no markup, emoji codes or highlighting"""
        self.console.print(text, markup=False, emoji=False, highlight=False)

    def error(self, message: str):
        """Print an error message to stderr"""
        self.error_console.print(message, style="red bold", markup=False)
