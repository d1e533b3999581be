# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Scoped, persistable settings used for consent state and identity cookies."""

from __future__ import annotations

from toolmeter.settings.project import ProjectSettings, SettingsScope
from toolmeter.settings.store import InMemorySettings, JsonFileSettings, SettingsStore, SettingValue


__all__ = (
    "InMemorySettings",
    "JsonFileSettings",
    "ProjectSettings",
    "SettingValue",
    "SettingsScope",
    "SettingsStore",
)
