# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""ToolMeter CLI entrypoint.

Commands are registered and lazy-loaded from here.
"""

from __future__ import annotations

import logging
import sys

from cyclopts import App, Parameter

from toolmeter import __version__
from toolmeter.cli.utils import console
from toolmeter.common import TOOLMETER_PREFIX, setup_logger
from toolmeter.config import get_telemetry_settings
from toolmeter.exceptions import ToolMeterError


app = App(
    "toolmeter",
    help="ToolMeter: consent-gated anonymous usage reporting for developer tools.",
    default_parameter=Parameter(negative=()),
    version=__version__,
    console=console,
)
app.command("toolmeter.cli.commands.status:app", name="status")
app.command("toolmeter.cli.commands.consent:app", name="consent")
app.command("toolmeter.cli.commands.report:app", name="report")


def main() -> None:
    """Main CLI entry point."""
    setup_logger("toolmeter", level=get_telemetry_settings().log_level)
    try:
        app()
    except KeyboardInterrupt:
        console.print(f"\n{TOOLMETER_PREFIX} [yellow]Interrupted.[/yellow]")
        sys.exit(130)
    except ToolMeterError as e:
        console.print(f"{TOOLMETER_PREFIX} [bold red]Error: {e}[/bold red]")
        if e.suggestions:
            console.print(f"{TOOLMETER_PREFIX} [yellow]Suggestions:[/yellow]")
            for suggestion in e.suggestions:
                console.print(f"  • {suggestion}")
        sys.exit(1)
    except Exception as e:
        logging.getLogger("toolmeter").debug("Unhandled CLI error", exc_info=True)
        console.print(f"{TOOLMETER_PREFIX} [bold red]Fatal error: {e}[/bold red]")
        console.print_exception(max_frames=10)
        sys.exit(1)


if __name__ == "__main__":
    main()


__all__ = ("app", "main")
