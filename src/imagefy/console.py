"""
User-facing console output and confirmation prompts.

Only the command-line layer talks to the user; the encoder and decoder log
through loguru and never print.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from .errors import ConfirmationDeclined


class ConsoleUI:
    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None,
                 assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.assume_yes = assume_yes

    def info(self, symbol: str, message: str) -> None:
        self.console.print(f"[bold green]\\[{escape(symbol)}][/bold green] [green]{escape(message)}[/green]", soft_wrap=True)

    def warn(self, message: str) -> None:
        self.console.print(f"[bold yellow]\\[!][/bold yellow] [yellow]{escape(message)}[/yellow]", soft_wrap=True)

    def error(self, message: str) -> None:
        self.err_console.print(f"[bold red]\\[X][/bold red] [red]{escape(message)}[/red]", soft_wrap=True)

    def confirm(self, message: str) -> None:
        """Ask for confirmation unless ``assume_yes``; raise ``ConfirmationDeclined`` on refusal."""
        if self.assume_yes:
            return
        try:
            accepted = Confirm.ask(message, default=True, console=self.console)
        except EOFError:
            accepted = False
        if not accepted:
            raise ConfirmationDeclined("Confirmation failed.")
