# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for ToolMeter tests."""

from __future__ import annotations

from collections.abc import Callable, Generator, Mapping
from pathlib import Path

import pytest

from toolmeter.common.query import build_form_body
from toolmeter.config import CI_ENVIRONMENT_VARIABLES, reset_telemetry_settings
from toolmeter.consent import DisplayDialog, set_globally_enabled
from toolmeter.measurement import HostInfo, MeasurementReporter
from toolmeter.settings import ProjectSettings
from toolmeter.transport import (
    CompletedRequestStatus,
    FormFields,
    reset_default_web_request,
    set_default_web_request,
)


GA_TRACKING_ID = "a-test-id"
PLUGIN_NAME = "my plugin"
SETTINGS_NAMESPACE = "com.foo.myplugin"
DATA_COLLECTION_DESCRIPTION = "to improve my plugin"
PRIVACY_POLICY = "http://a.link.to/a/privacy/policy"


# ===========================================================================
# *                    Test Doubles
# ===========================================================================


class RecordingWebRequest:
    """Web request that completes immediately and records what was posted.

    The random cache buster (`z`) is rewritten to 0 so bodies are deterministic.
    """

    def __init__(self) -> None:
        self.posted: list[tuple[str, str]] = []

    def post(
        self, url: str, headers: Mapping[str, str] | None, form_fields: FormFields
    ) -> CompletedRequestStatus:
        fields = [(key, "0" if key == "z" else value) for key, value in form_fields]
        self.posted.append((url, build_form_body(fields)))
        return CompletedRequestStatus()

    def get(self, url: str, headers: Mapping[str, str] | None) -> CompletedRequestStatus:
        raise AssertionError("RecordingWebRequest.get() should not be called")


class ScriptedDialog:
    """Dialog that answers with queued option indices, in order."""

    def __init__(self, choices: list[int]) -> None:
        self.choices = choices
        self.shown: list[tuple[str, str, str, str, str]] = []

    def __call__(self, title: str, message: str, option0: str, option1: str, option2: str) -> int:
        for text in (title, message, option0, option1, option2):
            assert text, "dialog text must not be empty"
        self.shown.append((title, message, option0, option1, option2))
        return self.choices.pop(0)


def unexpected_dialog(title: str, message: str, option0: str, option1: str, option2: str) -> int:
    raise AssertionError(f"Unexpected dialog displayed: {title}")


# ===========================================================================
# *                    Fixtures
# ===========================================================================


@pytest.fixture(autouse=True)
def isolated_telemetry_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run every test with reporting globally enabled and no ambient configuration."""
    monkeypatch.chdir(tmp_path)
    for name in CI_ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in (
        "TOOLMETER_TELEMETRY_ENABLED",
        "TOOLMETER_DISABLE_IN_CI",
        "TOOLMETER_COLLECT_URL",
        "TOOLMETER_HOST_VERSION",
        "TOOLMETER_HOST_PLATFORM",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TOOLMETER_SYSTEM_SETTINGS_DIR", str(tmp_path / "system"))
    reset_telemetry_settings()
    set_globally_enabled(True)
    yield
    set_globally_enabled(None)
    reset_default_web_request()
    reset_telemetry_settings()


@pytest.fixture
def web_request() -> RecordingWebRequest:
    recording = RecordingWebRequest()
    set_default_web_request(recording)
    return recording


@pytest.fixture
def settings() -> ProjectSettings:
    return ProjectSettings(persistence_enabled=False)


@pytest.fixture
def opened_urls() -> list[str]:
    return []


@pytest.fixture
def make_dialog() -> Callable[[list[int]], ScriptedDialog]:
    return ScriptedDialog


@pytest.fixture
def reporter(
    settings: ProjectSettings, web_request: RecordingWebRequest, opened_urls: list[str]
) -> MeasurementReporter:
    """Reporter with no consent recorded yet. Any dialog is a test failure until replaced."""
    display_dialog: DisplayDialog = unexpected_dialog
    analytics = MeasurementReporter.create(
        settings,
        GA_TRACKING_ID,
        SETTINGS_NAMESPACE,
        PLUGIN_NAME,
        DATA_COLLECTION_DESCRIPTION,
        PRIVACY_POLICY,
        display_dialog=display_dialog,
        open_url=opened_urls.append,
        web_request=web_request,
        host=HostInfo(version="5.6.1f1", platform="WindowsEditor"),
    )
    analytics.report_host_version = False
    analytics.report_host_platform = False
    return analytics
