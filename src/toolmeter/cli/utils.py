# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter
from rich.console import Console

from toolmeter.config import get_telemetry_settings
from toolmeter.consent import ConsentManager
from toolmeter.settings import ProjectSettings
from toolmeter.ui import ConsoleDialog, open_in_browser


DEFAULT_NAMESPACE = "toolmeter"
DEFAULT_PRIVACY_POLICY_URL = "https://policies.google.com/privacy"

NamespaceOption = Annotated[str, Parameter(name=["--namespace", "-n"])]
ProjectOption = Annotated[Path | None, Parameter(name=["--project", "-p"])]

console = Console(markup=True, emoji=True)


def load_settings(project_path: Path | None) -> ProjectSettings:
    """File-backed settings for `project_path` and the configured system directory."""
    return ProjectSettings.from_paths(
        project_root=project_path, system_dir=get_telemetry_settings().system_settings_dir
    )


def load_consent(
    namespace: str,
    project_path: Path | None,
    *,
    plugin_name: str | None = None,
    data_collection_description: str = "to help improve it",
    privacy_policy_url: str = DEFAULT_PRIVACY_POLICY_URL,
) -> ConsentManager:
    """Consent manager for `namespace`, wired to the terminal dialog and system browser."""
    return ConsentManager(
        load_settings(project_path),
        namespace,
        plugin_name or namespace,
        data_collection_description,
        privacy_policy_url,
        display_dialog=ConsoleDialog(console=console),
        open_url=open_in_browser,
    )


__all__ = (
    "DEFAULT_NAMESPACE",
    "DEFAULT_PRIVACY_POLICY_URL",
    "NamespaceOption",
    "ProjectOption",
    "console",
    "load_consent",
    "load_settings",
)
