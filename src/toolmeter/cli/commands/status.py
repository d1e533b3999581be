# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Status command for viewing consent state and identifiers."""

from __future__ import annotations

from cyclopts import App
from rich.table import Table

from toolmeter.cli.utils import (
    DEFAULT_NAMESPACE,
    NamespaceOption,
    ProjectOption,
    console,
    load_consent,
)
from toolmeter.consent import ConsentManager, is_globally_enabled


app = App("status", help="Show telemetry consent status.")


def build_status_table(consent: ConsentManager) -> Table:
    table = Table(title=f"Telemetry: {consent.settings_namespace}", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Globally enabled", _yes_no(is_globally_enabled()))
    table.add_row("State", consent.state.value.replace("_", " "))
    table.add_row("Enabled", _yes_no(consent.enabled))
    table.add_row("Consent requested", _yes_no(consent.consent_requested))
    table.add_row("Project cookie", consent.cookie or "[dim]not generated[/dim]")
    table.add_row("System cookie", consent.system_cookie or "[dim]not generated[/dim]")
    return table


def _yes_no(value: bool) -> str:  # noqa: FBT001
    return "[green]yes[/green]" if value else "[red]no[/red]"


@app.default
def status(*, namespace: NamespaceOption = DEFAULT_NAMESPACE, project: ProjectOption = None) -> None:
    """Show telemetry consent status.

    Args:
        namespace: Settings namespace of the tool or plugin
        project: Project directory (defaults to the git root or current directory)
    """
    console.print(build_status_table(load_consent(namespace, project)))


__all__ = ("app", "build_status_table", "status")
