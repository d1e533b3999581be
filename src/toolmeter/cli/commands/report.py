# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Report a single event from the command line."""

from __future__ import annotations

from cyclopts import App

from toolmeter.cli.utils import DEFAULT_NAMESPACE, NamespaceOption, ProjectOption, console, load_consent
from toolmeter.common import TOOLMETER_PREFIX
from toolmeter.measurement import MeasurementReporter
from toolmeter.transport import reset_default_web_request


app = App("report", help="Send one usage event, asking for consent first if needed.")


@app.default
def report(
    path: str,
    title: str,
    *,
    tracking_id: str,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    project: ProjectOption = None,
    base_path: str = "",
) -> None:
    """Send one usage event.

    Args:
        path: Event path, optionally with ?query and #anchor
        title: Human-readable event title
        tracking_id: Measurement protocol property id
        namespace: Settings namespace of the tool or plugin
        project: Project directory (defaults to the git root or current directory)
        base_path: Prefix added to the event path
    """
    reporter = MeasurementReporter(tracking_id, load_consent(namespace, project))
    reporter.base_path = base_path
    if not reporter.consent.may_report():
        console.print(f"{TOOLMETER_PREFIX} [dim]Reporting not permitted, nothing sent.[/dim]")
        return
    reporter.report(path, title)
    # The process is about to exit, so let queued hits go out first.
    reset_default_web_request(wait=True)
    console.print(f"{TOOLMETER_PREFIX} [green]✓[/green] Reported {path}")


__all__ = ("app", "report")
