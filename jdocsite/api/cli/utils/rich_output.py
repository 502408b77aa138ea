"""Rich-based output formatting for jdocsite CLI commands."""

import os
import sys

import rich.box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


class MessagePrefixes:
    """Constants for consistent message prefixes in fallback mode."""

    INFO = "[INFO]"
    SUCCESS = "[SUCCESS]"
    WARN = "[WARN]"
    ERROR = "[ERROR]"
    DEBUG = "[DEBUG]"


class RichOutputFormatter:
    """Terminal output using Rich, with a plain-text fallback."""

    def __init__(self, verbose: bool = False):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
        """
        self.verbose = verbose
        self._terminal_compatible = self._check_terminal_compatibility()
        self.console = Console() if self._terminal_compatible else None

    def _check_terminal_compatibility(self) -> bool:
        """Check if terminal supports Rich formatting."""
        if os.environ.get("JDOCSITE_NO_RICH"):
            return False
        if not sys.stdout.isatty():
            return False
        return os.environ.get("TERM", "") not in ("dumb", "unknown")

    def _safe_print(self, message: str, fallback_prefix: str = "", plain: str = "") -> None:
        """Print with Rich, or as plain text when the terminal cannot take it."""
        if self._terminal_compatible and self.console is not None:
            self.console.print(message)
            return
        text = plain or message
        print(f"{fallback_prefix} {text}" if fallback_prefix else text)

    def info(self, message: str) -> None:
        self._safe_print(f"[blue][INFO][/blue] {escape(message)}", MessagePrefixes.INFO, message)

    def success(self, message: str) -> None:
        self._safe_print(
            f"[green][SUCCESS][/green] {escape(message)}", MessagePrefixes.SUCCESS, message
        )

    def warning(self, message: str) -> None:
        self._safe_print(
            f"[yellow][WARN][/yellow] {escape(message)}", MessagePrefixes.WARN, message
        )

    def error(self, message: str) -> None:
        self._safe_print(f"[red][ERROR][/red] {escape(message)}", MessagePrefixes.ERROR, message)

    def verbose_info(self, message: str) -> None:
        """Print a message only in verbose mode."""
        if self.verbose:
            self._safe_print(
                f"[cyan][DEBUG][/cyan] {escape(message)}", MessagePrefixes.DEBUG, message
            )

    def section_header(self, title: str) -> None:
        if self.console is not None:
            self.console.print(Panel(title, style="bold cyan", padding=(0, 1)))
            return
        print(f"\n=== {title} ===\n")

    def box_section(self, title: str, content: list[tuple[str, str]], width: int = 60) -> None:
        """Print a bordered section with key-value pairs."""
        if self.console is None:
            print(f"\n{title}")
            for key, value in content:
                print(f"  {key}: {value}")
            return

        table = Table(title=title, show_header=False, box=rich.box.ROUNDED)
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value", style="white")
        for key, value in content:
            if len(value) > width - len(key) - 5:
                value = value[: width - len(key) - 8] + "..."
            table.add_row(key, escape(value))
        self.console.print(table)
