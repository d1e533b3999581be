# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Unit test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from toolmeter.settings import InMemorySettings, JsonFileSettings, ProjectSettings


@pytest.fixture
def file_settings(tmp_path: Path) -> ProjectSettings:
    """Settings backed by JSON files under the test's temporary directory."""
    return ProjectSettings(
        project=JsonFileSettings(tmp_path / "project" / ".toolmeter" / "settings.json"),
        system=JsonFileSettings(tmp_path / "system" / "settings.json"),
    )


@pytest.fixture
def memory_stores() -> tuple[InMemorySettings, InMemorySettings]:
    return InMemorySettings(), InMemorySettings()
