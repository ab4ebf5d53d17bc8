"""
cli/ui/console.py - Rich console utilities

Shared consoles, status lines and logging setup for the CLI
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# urllib3 connection noise
logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


def get_console(stderr: bool = False) -> Console:
    """Create a Rich Console instance."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# Global console instances
console = get_console()
err_console = get_console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Route log records through a Rich handler on stderr

    Args:
        verbose: DEBUG level when True, WARNING otherwise

    Returns:
        logging.Logger: the configured root logger
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Already configured
    if any(isinstance(h, RichHandler) for h in root.handlers):
        return root

    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    return root


# =============================================================================
# Status lines (Rich styles only, no emoji)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def print_success(message: str) -> None:
    """Green check mark line"""
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    """Red cross line (stderr)"""
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Yellow warning line"""
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Blue info line"""
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_prefix_table(prefixes: list[dict[str, str]], title: str | None = None) -> None:
    """Print ip prefixes as a table

    Args:
        prefixes: dicts with ip_prefix, region, network_border_group, service
        title: table title
    """
    table = Table(title=escape(title) if title else None, show_header=True)
    table.add_column("IP Prefix", style="cyan", no_wrap=True)
    table.add_column("Region", style="white", no_wrap=True)
    table.add_column("Network Border Group", style="white", no_wrap=True)
    table.add_column("Service", style="yellow", no_wrap=True)

    for p in prefixes:
        table.add_row(*(escape(p[key]) for key in ("ip_prefix", "region", "network_border_group", "service")))

    console.print(table)
