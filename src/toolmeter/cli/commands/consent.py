# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Commands for changing telemetry consent."""

from __future__ import annotations

from cyclopts import App

from toolmeter.cli.utils import (
    DEFAULT_NAMESPACE,
    DEFAULT_PRIVACY_POLICY_URL,
    NamespaceOption,
    ProjectOption,
    console,
    load_consent,
)
from toolmeter.common import TOOLMETER_PREFIX
from toolmeter.consent import is_globally_enabled


app = App("consent", help="Grant, revoke or reset telemetry consent.")


@app.command
def enable(*, namespace: NamespaceOption = DEFAULT_NAMESPACE, project: ProjectOption = None) -> None:
    """Allow anonymous usage reporting."""
    consent = load_consent(namespace, project)
    consent.enabled = True
    console.print(f"{TOOLMETER_PREFIX} [green]✓[/green] Telemetry enabled for {namespace}")


@app.command
def disable(
    *, namespace: NamespaceOption = DEFAULT_NAMESPACE, project: ProjectOption = None
) -> None:
    """Stop anonymous usage reporting."""
    consent = load_consent(namespace, project)
    consent.enabled = False
    console.print(f"{TOOLMETER_PREFIX} [yellow]✓[/yellow] Telemetry disabled for {namespace}")


@app.command
def reset(*, namespace: NamespaceOption = DEFAULT_NAMESPACE, project: ProjectOption = None) -> None:
    """Forget the consent answer and identifiers; the next report asks again."""
    load_consent(namespace, project).restore_default_settings()
    console.print(f"{TOOLMETER_PREFIX} Telemetry settings restored to defaults for {namespace}")


@app.command
def prompt(
    *,
    namespace: NamespaceOption = DEFAULT_NAMESPACE,
    project: ProjectOption = None,
    plugin_name: str | None = None,
    description: str = "to help improve it",
    privacy_policy_url: str = DEFAULT_PRIVACY_POLICY_URL,
) -> None:
    """Ask for consent in the terminal if it has not been asked yet.

    Args:
        namespace: Settings namespace of the tool or plugin
        project: Project directory (defaults to the git root or current directory)
        plugin_name: Name shown in the dialog (defaults to the namespace)
        description: Why the data is collected
        privacy_policy_url: Link opened by the "Privacy Policy" option
    """
    if not is_globally_enabled():
        console.print(f"{TOOLMETER_PREFIX} [dim]Telemetry is globally disabled.[/dim]")
        return
    consent = load_consent(
        namespace,
        project,
        plugin_name=plugin_name,
        data_collection_description=description,
        privacy_policy_url=privacy_policy_url,
    )
    if consent.consent_requested:
        console.print(f"{TOOLMETER_PREFIX} Consent already recorded: {consent.state.value}")
        return
    consent.prompt_to_enable()
    console.print(f"{TOOLMETER_PREFIX} Consent recorded: {consent.state.value}")


__all__ = ("app", "disable", "enable", "prompt", "reset")
