"""Interactive input — masked passphrase and plain token prompts."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console

from pubtoken.secret import Secret


class Prompter(Protocol):
    """Source of interactive input.  Every read blocks until a line arrives."""

    def read_secret(self, prompt: str) -> Secret:
        """Read a masked line, whitespace-trimmed."""

    def read_line(self, prompt: str) -> Secret:
        """Read a visible line, whitespace-trimmed."""

    def notify(self, message: str) -> None:
        """Show an informational message."""


class ConsolePrompter:
    """Prompts on stderr so stdout stays clean for the upload tool."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def read_secret(self, prompt: str) -> Secret:
        return Secret(self.console.input(f"{prompt}: ", password=True).strip())

    def read_line(self, prompt: str) -> Secret:
        return Secret(self.console.input(f"{prompt}: ").strip())

    def notify(self, message: str) -> None:
        self.console.print(message)
