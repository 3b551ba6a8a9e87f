"""Console notices for connect flows."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console


class Notifier:
    """Render informational and success notices using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def log(self, title: str, body_lines: Sequence[str] = ()) -> None:
        """Render an informational notice."""
        self.console.print()
        self.console.print(f"[bold cyan]>[/bold cyan] [bold]{title}[/bold]")
        self._print_body(body_lines)

    def success(self, title: str, body_lines: Sequence[str] = ()) -> None:
        """Render a success notice."""
        self.console.print()
        self.console.print(f"[bold green]✔[/bold green] [bold green]{title}[/bold green]")
        self._print_body(body_lines)

    def _print_body(self, body_lines: Sequence[str]) -> None:
        if not body_lines:
            return
        self.console.print()
        for line in body_lines:
            self.console.print(f"  {line}", highlight=False)
        self.console.print()
