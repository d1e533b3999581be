# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Project and system settings scopes behind one interface."""

from __future__ import annotations

import logging

from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path

from toolmeter.common.filesystem import get_project_root, get_user_config_dir
from toolmeter.settings.store import InMemorySettings, JsonFileSettings, SettingsStore


logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"
PROJECT_SETTINGS_DIRNAME = ".toolmeter"


class SettingsScope(StrEnum):
    """Which namespace a setting lives in."""

    PROJECT = "project"
    """Tied to the current codebase."""
    SYSTEM = "system"
    """Tied to the installing user and machine."""


class ProjectSettings:
    """Typed access to the project and system settings stores.

    Writes stay in memory until `persist` is called for the scope. Setting
    `persistence_enabled` to False turns `persist` into a no-op.
    """

    def __init__(
        self,
        project: SettingsStore | None = None,
        system: SettingsStore | None = None,
        *,
        persistence_enabled: bool = True,
    ) -> None:
        self._stores: dict[SettingsScope, SettingsStore] = {
            SettingsScope.PROJECT: project if project is not None else InMemorySettings(),
            SettingsScope.SYSTEM: system if system is not None else InMemorySettings(),
        }
        self.persistence_enabled = persistence_enabled

    @classmethod
    def from_paths(
        cls, project_root: Path | None = None, system_dir: Path | None = None
    ) -> ProjectSettings:
        """Create file-backed settings for a project directory and the current user.

        Args:
            project_root: Project directory. Defaults to the git root or current directory.
            system_dir: Directory for user-wide settings. Defaults to the user config directory.
        """
        project_root = project_root or get_project_root()
        system_dir = system_dir or get_user_config_dir()
        return cls(
            project=JsonFileSettings(project_root / PROJECT_SETTINGS_DIRNAME / SETTINGS_FILENAME),
            system=JsonFileSettings(system_dir / SETTINGS_FILENAME),
        )

    def store(self, scope: SettingsScope) -> SettingsStore:
        return self._stores[SettingsScope(scope)]

    def get_bool(
        self, key: str, default: bool = False, *, scope: SettingsScope = SettingsScope.PROJECT
    ) -> bool:
        value = self.store(scope).get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    def set_bool(
        self, key: str, value: bool, *, scope: SettingsScope = SettingsScope.PROJECT
    ) -> None:
        self.store(scope).set(key, bool(value))

    def get_str(
        self, key: str, default: str = "", *, scope: SettingsScope = SettingsScope.PROJECT
    ) -> str:
        value = self.store(scope).get(key)
        return default if value is None else str(value)

    def set_str(self, key: str, value: str, *, scope: SettingsScope = SettingsScope.PROJECT) -> None:
        self.store(scope).set(key, value)

    def delete_keys(
        self, keys: Iterable[str], *, scope: SettingsScope = SettingsScope.PROJECT
    ) -> None:
        store = self.store(scope)
        for key in keys:
            store.delete(key)

    def persist(self, scope: SettingsScope = SettingsScope.PROJECT) -> None:
        if not self.persistence_enabled:
            logger.debug("Persistence disabled, not saving %s settings", scope)
            return
        self.store(scope).persist()


__all__ = ("PROJECT_SETTINGS_DIRNAME", "SETTINGS_FILENAME", "ProjectSettings", "SettingsScope")
