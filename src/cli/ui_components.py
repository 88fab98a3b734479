"""CLI UI components (Rich).

Keeps the visual details out of the command functions.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.command_builder import format_command
from core.domain.models import CompileResult


def print_banner(console: Console) -> None:
    """Print the welcome banner (disabled with `--quiet`)."""

    title = Text("jsx-transformer", style="bold cyan")
    subtitle = Text("Embedded React tools • JSX → JavaScript", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_error(console: Console, message: str) -> None:
    console.print(Panel(Text(message), title=Text("Error", style="bold red"), border_style="red"))


def build_result_panel(result: CompileResult) -> Panel:
    """Panel summarizing a successful compile."""

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bright_green", no_wrap=True)
    table.add_column(style="white")
    table.add_row("Toolchain", Text(str(result.extraction.destination)))
    table.add_row(
        "Extracted",
        f"{result.extraction.files} files, {result.extraction.directories} directories",
    )
    table.add_row("Command", Text(format_command(result.command)))
    table.add_row("Exit code", str(result.process.exit_code))
    return Panel(table, title=Text("JSX transformed", style="bold green"), border_style="green")
