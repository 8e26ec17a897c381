"""Click-based CLI for AKCM - Amazon Kids Content Manager."""

from __future__ import annotations

import asyncio
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from pydantic import ValidationError
from rich.console import Console as RichConsole

from akcm import __version__
from akcm.config import (
    AkcmConfig,
    Category,
    DesiredState,
    apply_overrides,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from akcm.output import Console, create_console
from akcm.reconcile.errors import AkcmError
from akcm.reconcile.session import ReconciliationSession, RunResult
from akcm.utils.platform import supports_signal_controls

console = RichConsole()

CONTENT_TYPES = [c.value for c in Category if c != Category.UNKNOWN]


@click.group()
@click.version_option(version=__version__, prog_name="akcm")
def cli() -> None:
    """AKCM - Amazon Kids Content Manager.

    Bulk enable or disable content on the Amazon Kids parent dashboard.

    \b
    Start Chromium with remote debugging, log in to the parent
    dashboard, open the content list, then run:
        akcm run --mode disable
    """
    pass


@cli.command()
@click.option(
    "--mode",
    "-m",
    type=click.Choice([m.value for m in DesiredState]),
    default=None,
    help="Drive every selected item to this state",
)
@click.option(
    "--type",
    "-t",
    "content_types",
    multiple=True,
    type=click.Choice(CONTENT_TYPES, case_sensitive=False),
    help="Only touch this content type (repeatable)",
)
@click.option("--keyword", "-k", "keywords", multiple=True, help="Only titles containing this keyword (repeatable)")
@click.option("--exclude", "-x", "exclude_keywords", multiple=True, help="Skip titles containing this keyword (repeatable)")
@click.option("--case-sensitive", is_flag=True, help="Case-sensitive keyword matching")
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Items actuated at once")
@click.option("--max-retries", type=click.IntRange(min=0), default=None, help="Max retries per failed toggle")
@click.option("--dry-run", "-n", is_flag=True, help="Preview without changing anything")
@click.option("--child", default=None, help="Child to manage when no child is selected")
@click.option("--cdp", default=None, help="Chromium remote debugging endpoint")
@click.option("--verbose", "-v", is_flag=True, help="Show per-item detail")
@click.option("--quiet", "-q", is_flag=True, help="Show only the summary")
@click.option("--config", "config_file", type=click.Path(path_type=Path), help="Configuration file")
def run(
    mode: Optional[str],
    content_types: tuple[str, ...],
    keywords: tuple[str, ...],
    exclude_keywords: tuple[str, ...],
    case_sensitive: bool,
    concurrency: Optional[int],
    max_retries: Optional[int],
    dry_run: bool,
    child: Optional[str],
    cdp: Optional[str],
    verbose: bool,
    quiet: bool,
    config_file: Optional[Path],
) -> None:
    """Reconcile all dashboard content toward the chosen state.

    \b
    Runtime controls (POSIX):
        kill -USR1 <pid>   pause after the current batch
        kill -USR2 <pid>   resume
        Ctrl+C             stop gracefully (press again to abort)
    """
    try:
        config = load_config(config_file)
        config = apply_overrides(
            config,
            policy__mode=mode,
            policy__content_types=list(content_types) or None,
            policy__keywords=list(keywords) or None,
            policy__exclude_keywords=list(exclude_keywords) or None,
            policy__keyword_case_sensitive=True if case_sensitive else None,
            policy__concurrency=concurrency,
            policy__max_retries=max_retries,
            policy__dry_run=True if dry_run else None,
            host__child_name=child,
            host__cdp_endpoint=cdp,
        )
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        sys.exit(1)

    out = create_console(
        level=config.output.log_level,
        colored=config.output.colored,
        verbose=verbose,
        quiet=quiet,
    )

    try:
        result = asyncio.run(_run_in_browser(config, out))
    except AkcmError as e:
        out.error(str(e))
        sys.exit(1)

    if result.stopped:
        out.info("Run stopped by operator")
    elif result.success:
        out.success("All selected items reconciled")


async def _run_in_browser(config: AkcmConfig, out: Console) -> RunResult:
    """Attach to the browser and run one reconciliation session."""
    try:
        from playwright.async_api import Error as PlaywrightError

        from akcm.adapters.playwright_page import connect_host_page
    except ImportError as e:
        raise click.ClickException("Playwright is not installed. Install with: pip install 'akcm[browser]'") from e

    out.verbose(f"Connecting to {config.host.cdp_endpoint}")
    try:
        async with connect_host_page(config.host.cdp_endpoint, config.host.url_patterns) as page:
            session = ReconciliationSession(page, config, reporter=out)
            installed = install_signal_controls(session, out)
            try:
                return await session.run()
            finally:
                remove_signal_controls(installed)
                await session.aclose()
    except PlaywrightError as e:
        raise AkcmError(f"Browser error: {e}") from e


def install_signal_controls(session: ReconciliationSession, out: Console) -> list[int]:
    """
    Bind pause, resume and stop to POSIX signals on the running loop.

    Args:
        session: Session to control.
        out: Console for the controls hint.

    Returns:
        Signals that were installed.
    """
    if not supports_signal_controls():
        out.verbose("Signal controls not available on this platform, Ctrl+C aborts")
        return []

    loop = asyncio.get_running_loop()

    def interrupt() -> None:
        # The next Ctrl+C falls through to the default handler and aborts
        loop.remove_signal_handler(signal.SIGINT)
        session.stop()

    loop.add_signal_handler(signal.SIGUSR1, session.pause)
    loop.add_signal_handler(signal.SIGUSR2, session.resume)
    loop.add_signal_handler(signal.SIGINT, interrupt)

    pid = os.getpid()
    out.info(f"Controls: kill -USR1 {pid} (pause), kill -USR2 {pid} (resume), Ctrl+C (stop)")
    return [signal.SIGUSR1, signal.SIGUSR2, signal.SIGINT]


def remove_signal_controls(signals: list[int]) -> None:
    """Remove handlers added by install_signal_controls."""
    if not signals:
        return
    loop = asyncio.get_running_loop()
    for sig in signals:
        loop.remove_signal_handler(sig)


# =============================================================================
# Config Commands
# =============================================================================


@cli.group()
def config() -> None:
    """Configuration file commands.

    \b
    Default location: ~/.config/akcm/config.yaml
    Override with the AKCM_CONFIG environment variable.
    """
    pass


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration")
def config_init(force: bool) -> None:
    """Create a commented default configuration file."""
    path = get_config_path()
    if path.exists() and force:
        path.unlink()

    path, created = ensure_config_exists(path)
    if created:
        console.print(f"[green]Created configuration:[/green] {path}")
    else:
        console.print(f"[yellow]Warning:[/yellow] Configuration already exists: {path}")
        console.print("[dim]Use --force to overwrite[/dim]")


@config.command("show")
@click.option("--config", "config_file", type=click.Path(path_type=Path), help="Configuration file")
def config_show(config_file: Optional[Path]) -> None:
    """Show the effective configuration."""
    path = config_file or get_config_path()
    try:
        cfg = load_config(path)
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        sys.exit(1)

    out = Console(colored=cfg.output.colored)
    out.print_config_summary(str(path), _flatten(cfg.model_dump(mode="json")))
    if not path.exists():
        console.print("[dim]No configuration file found, showing defaults[/dim]")


@config.command("validate")
@click.option("--config", "config_file", type=click.Path(path_type=Path), help="Configuration file")
def config_validate(config_file: Optional[Path]) -> None:
    """Validate a configuration file."""
    path = config_file or get_config_path()
    is_valid, errors = validate_config_file(path)

    if is_valid:
        console.print(f"[green]Configuration is valid:[/green] {path}")
        return

    console.print(f"[red]Configuration is invalid:[/red] {path}")
    for error in errors:
        console.print(f"  [red]✗[/red] {error}")
    sys.exit(1)


@config.command("path")
def config_path() -> None:
    """Print the configuration file path."""
    click.echo(str(get_config_path()))


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested config sections to dotted keys."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(_flatten(value, f"{name}."))
        else:
            flat[name] = value
    return flat


if __name__ == "__main__":
    cli()
