"""Central UI handler for Essence.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command.

Usage:
    from essence.ui import console, print_success, print_warning

    print_success("Schema compiled")
    print_warning("schema.yaml already exists")
"""

import sys

from rich.console import Console
from rich.theme import Theme

ESSENCE_THEME = Theme({
    "warning": "bold yellow",
    "success": "bold green",
    "path": "bold cyan",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=ESSENCE_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]WARNING:[/warning] {msg}", highlight=False)


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}", highlight=False)
