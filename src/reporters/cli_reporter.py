"""
CLI Reporter Module
===================

Provides rich terminal output for credential report state using the
Rich library.

Classes
-------
CLIReporter
    Main reporter class for terminal output.

Example
-------
>>> from src.reporters import CLIReporter
>>>
>>> reporter = CLIReporter()
>>> reporter.report(resource.read())

See Also
--------
rich : Python library for rich text and formatting.
JSONReporter : For programmatic access.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.core.base_resource import ResourceState

# Module logger
logger = logging.getLogger(__name__)

YES = "[green]yes[/green]"
NO = "[dim]no[/dim]"


class CLIReporter:
    """
    Reporter for displaying the credential report in the terminal.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.

    Attributes
    ----------
    console : Console
        The Rich Console used for output.

    Examples
    --------
    >>> from rich.console import Console
    >>> reporter = CLIReporter(console=Console(force_terminal=True))
    >>> reporter.report(state)
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the CLI reporter with a Rich Console."""
        self.console = console or Console()
        logger.debug("Initialized CLIReporter")

    def report(self, state: ResourceState) -> None:
        """
        Print the header, summary and user table of a resource state.

        Parameters
        ----------
        state : ResourceState
            State returned by ``CredentialReportResource.read()``.
        """
        rows = state.attributes.get("report") or []

        self._print_header(state)
        self._print_summary(rows)

        if rows:
            self._print_users_table(rows)
        else:
            self.console.print("\n[yellow]The credential report has no users.[/yellow]")

    # =========================================================================
    # Private Methods: Output Formatting
    # =========================================================================

    def _print_header(self, state: ResourceState) -> None:
        header_text = Text()
        header_text.append("\nIAM Credential Report\n", style="bold blue")
        header_text.append(f"Resource: {state.resource_id}", style="dim")
        self.console.print(Panel(header_text, border_style="blue"))

    def _print_summary(self, rows: List[Dict[str, Any]]) -> None:
        """
        Print summary statistics.

        Users with a console password but no MFA are highlighted in red.
        """
        without_mfa = [
            r for r in rows if r["password_enabled"] and not r["mfa_active"]
        ]
        with_keys = [r for r in rows if any(k["active"] for k in r["access_keys"])]

        summary = Table(show_header=False, box=None, padding=(0, 2))
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", style="white")

        summary.add_row("Users:", str(len(rows)))
        mfa_style = "red" if without_mfa else "green"
        summary.add_row(
            "Password Without MFA:",
            f"[{mfa_style}]{len(without_mfa)}[/]",
        )
        summary.add_row(
            "Virtual MFA:", str(sum(1 for r in rows if r["mfa_virtual"]))
        )
        summary.add_row("Active Access Keys:", str(len(with_keys)))

        self.console.print("\n")
        self.console.print(summary)

    def _print_users_table(self, rows: List[Dict[str, Any]]) -> None:
        table = Table(title="\nUsers", title_style="bold", show_lines=False)

        table.add_column("User", style="cyan", no_wrap=True)
        table.add_column("Password", justify="center")
        table.add_column("Password Last Used", style="dim")
        table.add_column("MFA", justify="center")
        table.add_column("Virtual MFA", justify="center")
        table.add_column("Key 1", justify="center")
        table.add_column("Key 2", justify="center")

        for row in rows:
            key1, key2 = row["access_keys"]
            table.add_row(
                row["user"],
                self._flag(row["password_enabled"]),
                row["password_last_used"],
                self._flag(row["mfa_active"]),
                self._flag(row["mfa_virtual"]),
                self._flag(key1["active"]),
                self._flag(key2["active"]),
            )

        self.console.print(table)

    @staticmethod
    def _flag(value: bool) -> str:
        return YES if value else NO

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"\n[red bold]Error:[/red bold] {message}")
