# AKCM Console Output
# Rich-based run reporter and log lines

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from akcm.config.schema import LogLevel
from akcm.reconcile.stats import Stats
from akcm.utils.timing import Stopwatch, format_elapsed

if TYPE_CHECKING:
    from akcm.reconcile.session import RunResult

PREFIX = "AKCM"


class Console:
    """
    Console output manager using Rich.

    Implements the Reporter interface. Every line carries the elapsed time
    since the console was created (or last reset).
    """

    def __init__(self, *, level: LogLevel = LogLevel.NORMAL, colored: bool = True):
        """
        Initialize console.

        Args:
            level: Output verbosity.
            colored: Enable colored output.
        """
        self.level = level
        self.clock = Stopwatch()
        self._console = RichConsole(force_terminal=colored, no_color=not colored, highlight=False)

    @property
    def is_verbose(self) -> bool:
        return self.level == LogLevel.VERBOSE

    @property
    def is_quiet(self) -> bool:
        return self.level == LogLevel.QUIET

    def _prefix(self) -> str:
        return f"[dim]\\[{PREFIX} {self.clock}][/dim]"

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def info(self, message: str) -> None:
        """Normal-level progress line."""
        if not self.is_quiet:
            self._console.print(f"{self._prefix()} {escape(message)}")

    def verbose(self, message: str) -> None:
        """Per-item detail, shown only at verbose level."""
        if self.is_verbose:
            self._console.print(f"{self._prefix()} [dim]{escape(message)}[/dim]")

    def warning(self, message: str) -> None:
        """Warning line, hidden at quiet level."""
        if not self.is_quiet:
            self._console.print(f"{self._prefix()} [yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Error line, always shown."""
        self._console.print(f"{self._prefix()} [red]Error:[/red] {escape(message)}")

    def success(self, message: str) -> None:
        """Green status line."""
        if not self.is_quiet:
            self._console.print(f"{self._prefix()} [green]{escape(message)}[/green]")

    def page_processed(self, page: int, items_seen: int, stats: Stats) -> None:
        """Progress line after each page."""
        if self.is_quiet:
            return
        self._console.print(
            f"{self._prefix()} Page {page}: {items_seen} items | "
            f"[green]Toggled: {stats.toggled}[/green] | "
            f"Skipped: {stats.skipped} | "
            f"[red]Failed: {stats.failed}[/red] | "
            f"Retries: {stats.retried}"
        )

    def run_finished(self, result: RunResult) -> None:
        """
        Print the run summary panel.

        Shown at every level, including quiet.

        Args:
            result: Finished run.
        """
        policy = result.policy
        verb = policy.mode.past_tense.capitalize()
        lines = []

        if policy.dry_run:
            lines.append("[yellow]DRY RUN - no changes were made[/yellow]")
        if result.stopped:
            lines.append("[yellow]Stopped before completion[/yellow]")

        lines.append(f"Mode: {policy.mode.value}")
        lines.append(f"Duration: {format_elapsed(result.duration)}")
        lines.append(f"Pages: {result.pages}")
        lines.append(f"{verb}: {result.stats.toggled}")
        lines.append(f"Skipped: {result.stats.skipped}")
        lines.append(f"Failed: {result.stats.failed}")
        lines.append(f"Retries: {result.stats.retried}")
        if result.stats.reverted:
            lines.append(f"Changed back during run: {result.stats.reverted} (counted as skipped, then actuated)")

        if policy.keywords:
            lines.append(f"Keywords: {escape(', '.join(policy.keywords))}")
        if policy.exclude_keywords:
            lines.append(f"Excluded: {escape(', '.join(policy.exclude_keywords))}")
        if policy.content_types:
            lines.append(f"Content types: {', '.join(t.value for t in policy.content_types)}")

        if result.stats.failed:
            border = "red"
        elif result.stopped or policy.dry_run:
            border = "yellow"
        else:
            border = "green"

        self._console.print()
        self._console.print(Panel("\n".join(lines), title="Summary", border_style=border))

    def print_config_summary(self, config_path: str, values: dict[str, object]) -> None:
        """
        Print effective configuration as a table.

        Args:
            config_path: Path the configuration was loaded from.
            values: Flattened ``section.key -> value`` mapping.
        """
        table = Table(title=f"AKCM Configuration ({config_path})", show_header=True)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")

        for key, value in values.items():
            table.add_row(key, "[dim]-[/dim]" if value is None else escape(str(value)))

        self._console.print(table)


def create_console(
    *,
    level: LogLevel = LogLevel.NORMAL,
    colored: bool = True,
    verbose: bool = False,
    quiet: bool = False,
) -> Console:
    """
    Create a console instance.

    The verbose and quiet flags override ``level`` when set.

    Args:
        level: Configured verbosity.
        colored: Enable colored output.
        verbose: Force verbose output.
        quiet: Force quiet output.

    Returns:
        Console instance.
    """
    effective: Optional[LogLevel] = None
    if verbose:
        effective = LogLevel.VERBOSE
    elif quiet:
        effective = LogLevel.QUIET
    return Console(level=effective or level, colored=colored)
