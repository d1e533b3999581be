# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unit tests for the scoped settings stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from toolmeter.exceptions import SettingsError
from toolmeter.settings import (
    InMemorySettings,
    JsonFileSettings,
    ProjectSettings,
    SettingsScope,
    SettingsStore,
)


pytestmark = [pytest.mark.unit, pytest.mark.settings]


class TestInMemorySettings:
    def test_get_set_delete(self):
        store = InMemorySettings()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        store.delete("missing")
        assert store.get("k") is None

    def test_satisfies_protocol(self):
        assert isinstance(InMemorySettings(), SettingsStore)


class TestJsonFileSettings:
    def test_persist_and_reload(self, tmp_path: Path):
        path = tmp_path / "nested" / "settings.json"
        store = JsonFileSettings(path)
        store.set("enabled", False)
        store.set("cookie", "abc")
        assert not path.exists()

        store.persist()

        reloaded = JsonFileSettings(path)
        assert reloaded.get("enabled") is False
        assert reloaded.get("cookie") == "abc"
        assert not path.with_name("settings.json.tmp").exists()

    def test_invalid_json_raises_settings_error(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(SettingsError) as exc_info:
            JsonFileSettings(path)
        assert exc_info.value.suggestions

    def test_non_object_raises_settings_error(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(SettingsError):
            JsonFileSettings(path)


class TestProjectSettings:
    """Tests for the two-scope settings facade."""

    def test_scopes_are_independent(self):
        settings = ProjectSettings()
        settings.set_str("key", "project value", scope=SettingsScope.PROJECT)
        settings.set_str("key", "system value", scope=SettingsScope.SYSTEM)
        assert settings.get_str("key") == "project value"
        assert settings.get_str("key", scope=SettingsScope.SYSTEM) == "system value"

    def test_typed_defaults(self):
        settings = ProjectSettings()
        assert settings.get_bool("missing", default=True) is True
        assert settings.get_str("missing") == ""
        assert settings.get_str("missing", "fallback") == "fallback"

    def test_bool_from_string(self, memory_stores: tuple[InMemorySettings, InMemorySettings]):
        project, system = memory_stores
        project.set("flag", "true")
        project.set("other", "no")
        settings = ProjectSettings(project, system)
        assert settings.get_bool("flag") is True
        assert settings.get_bool("other", default=True) is False

    def test_delete_keys(self):
        settings = ProjectSettings()
        settings.set_bool("a", True)
        settings.set_bool("b", True)
        settings.delete_keys(["a", "b", "c"])
        assert settings.get_bool("a") is False
        assert settings.get_bool("b") is False

    def test_persist_writes_each_scope(self, file_settings: ProjectSettings, tmp_path: Path):
        file_settings.set_str("cookie", "p")
        file_settings.set_str("cookie", "s", scope=SettingsScope.SYSTEM)
        file_settings.persist(SettingsScope.PROJECT)
        assert (tmp_path / "project" / ".toolmeter" / "settings.json").exists()
        assert not (tmp_path / "system" / "settings.json").exists()
        file_settings.persist(SettingsScope.SYSTEM)
        assert (tmp_path / "system" / "settings.json").exists()

    def test_persistence_can_be_disabled(self, file_settings: ProjectSettings, tmp_path: Path):
        file_settings.persistence_enabled = False
        file_settings.set_str("cookie", "p")
        file_settings.persist(SettingsScope.PROJECT)
        assert not (tmp_path / "project" / ".toolmeter" / "settings.json").exists()

    def test_from_paths(self, tmp_path: Path):
        settings = ProjectSettings.from_paths(tmp_path / "repo", tmp_path / "user")
        settings.set_bool("enabled", True)
        settings.persist()
        assert (tmp_path / "repo" / ".toolmeter" / "settings.json").exists()
