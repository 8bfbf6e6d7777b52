#!/usr/bin/env python3
"""
Console UI Module using Rich

Provides the styled console output, activity spinner, operation summaries and
exception reporting used by the Elenchos command loop.
"""

from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table


class ConsoleUI:
    """Console UI handler using Rich"""

    def __init__(self, force_terminal: Optional[bool] = None, console: Optional[Console] = None):
        """Initialize console with optional terminal forcing or an existing console"""
        self.console = console or Console(force_terminal=force_terminal, highlight=False)

    # Basic styled output methods
    def print_success(self, message: str):
        """Print success message in green"""
        self.console.print(message, style="green")

    def print_error(self, message: str):
        """Print error message in red"""
        self.console.print(message, style="red bold")

    def print_warning(self, message: str):
        """Print warning message in yellow"""
        self.console.print(message, style="yellow")

    def print_info(self, message: str):
        """Print info message in cyan"""
        self.console.print(message, style="cyan")

    def print_plain(self, message: str = ""):
        """Print message in plain white"""
        self.console.print(message, style="white")

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print a header with optional subtitle"""
        if subtitle:
            header_text = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            header_text = f"[bold]{title}[/bold]"

        panel = Panel(header_text, box=box.ROUNDED, padding=(0, 1))
        self.console.print(panel)

    # Configuration display
    def show_configuration(self, config: dict[str, Any]):
        """Display configuration in a formatted table"""
        table = Table(show_header=False, box=box.SIMPLE)
        table.add_column("Setting", style="cyan dim", min_width=20, justify="right")
        table.add_column("Value", style="cyan", min_width=30)

        for key, value in config.items():
            table.add_row(key, escape(str(value)))

        self.console.print(table)

    # Progress display
    def create_activity_progress(self):
        """Create a Rich progress context manager for activity-only display (no counts)"""
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )

    def show_operation_summary(self, successful: list[str], failed: list[tuple], operation_name: str = "operation"):
        """Show summary of completed operations"""
        if successful:
            self.print_success(f"Successfully {operation_name} {len(successful)} locations")

        if failed:
            self.print_error(f"Failed to {operation_name} {len(failed)} locations:")
            for name, error in failed:
                self.console.print(f"[red dim]  • {escape(name)}: {escape(str(error))}[/red dim]")

    def print_exception(self, path: str, error: BaseException):
        """Report an exception with its traceback; call from inside an except block"""
        self.print_error(f"Cannot read {escape(path)}: {escape(str(error))}")
        self.console.print_exception()

    # Utility methods
    def clear_screen(self):
        """Clear the console screen"""
        self.console.clear()

    def print_separator(self, char: str = "=", length: int = 88):
        """Print a separator line"""
        self.console.print(char * length, style="dim")
