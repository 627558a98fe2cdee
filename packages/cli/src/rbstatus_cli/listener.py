"""Build listener that prints to the terminal."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from rbstatus_core.listener import BuildListener


class ConsoleListener(BuildListener):
    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console()

    def _emit(self, message: str, error: bool) -> None:
        if error:
            self.console.print(f"[red]ERROR:[/red] {escape(message)}", soft_wrap=True)
        else:
            self.console.print(escape(message), highlight=False, soft_wrap=True)
