"""Shared Rich Console for command output.

Status lines go through print_success/print_error so every command marks
outcomes the same way.
"""

from rich.console import Console
from rich.markup import escape

_console: Console | None = None


def get_console() -> Console:
    """Get or create the shared Rich Console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_success(message: str) -> None:
    get_console().print(f"✓ {escape(message)}", style="green")


def print_error(message: str) -> None:
    """Print a failure line. User-supplied text is escaped, not parsed as markup."""
    get_console().print(f"❌ {escape(message)}", style="red")
