# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Terminal implementations of the dialog and URL-opening capabilities."""

from __future__ import annotations

import logging
import webbrowser

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt


logger = logging.getLogger(__name__)


class ConsoleDialog:
    """Consent dialog rendered in the terminal with rich.

    Instances are callables matching `DisplayDialog`: they print the message in
    a panel, list the three options and return the zero-based index chosen.
    """

    def __init__(self, *, console: Console | None = None) -> None:
        self.console = console or Console(markup=True, emoji=True)

    def __call__(self, title: str, message: str, option0: str, option1: str, option2: str) -> int:
        options = (option0, option1, option2)
        self.console.print(Panel(message, title=f"[bold]{title}[/bold]", expand=False))
        for number, label in enumerate(options, start=1):
            self.console.print(f"  [cyan]{number}[/cyan]. {label}")
        answer = Prompt.ask(
            "Choose an option",
            console=self.console,
            choices=[str(number) for number in range(1, len(options) + 1)],
            default="1",
        )
        return int(answer) - 1


def open_in_browser(url: str) -> None:
    """Open `url` in the system browser."""
    if not webbrowser.open(url, new=2):
        logger.warning("Could not open a browser for %s", url)


__all__ = ("ConsoleDialog", "open_in_browser")
