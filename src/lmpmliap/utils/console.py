"""Coloured status lines for the terminal, mirrored into the log file."""
import logging

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)
logger = logging.getLogger("lmpmliap")

_ECHOED = {"echoed": True}


def print_status(message: str) -> None:
    console.print(f"[blue]\\[INFO][/blue] {escape(message)}")
    logger.info(message, extra=_ECHOED)


def print_success(message: str) -> None:
    console.print(f"[green]\\[SUCCESS][/green] {escape(message)}")
    logger.info(message, extra=_ECHOED)


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]\\[WARNING][/bold yellow] {escape(message)}")
    logger.warning(message, extra=_ECHOED)


def print_error(message: str) -> None:
    console.print(f"[red]\\[ERROR][/red] {escape(message)}")
    logger.error(message, extra=_ECHOED)
