# cli/ui - console components (rich)
"""
Console output helpers for the CLI
"""

from .console import (
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    err_console,
    get_console,
    print_error,
    print_info,
    print_prefix_table,
    print_success,
    print_warning,
    setup_logging,
)

__all__ = [
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "console",
    "err_console",
    "get_console",
    "print_error",
    "print_info",
    "print_prefix_table",
    "print_success",
    "print_warning",
    "setup_logging",
]
