# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Tests for the consent, status and report CLI commands.

Commands are called directly; settings live under the test's temporary
directory (project) and TOOLMETER_SYSTEM_SETTINGS_DIR (system).
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from rich.console import Console

from toolmeter.cli.commands import consent as consent_commands
from toolmeter.cli.commands import report as report_commands
from toolmeter.cli.commands.status import build_status_table
from toolmeter.cli.utils import load_consent
from toolmeter.consent import ConsentOption, ConsentState, set_globally_enabled


pytestmark = [pytest.mark.unit, pytest.mark.cli]

NAMESPACE = "com.example.tool"


@pytest.fixture
def quiet_console(monkeypatch: pytest.MonkeyPatch) -> Console:
    console = Console(record=True, width=120)
    monkeypatch.setattr(consent_commands, "console", console)
    monkeypatch.setattr(report_commands, "console", console)
    return console


@pytest.fixture
def scripted_console_dialog(monkeypatch: pytest.MonkeyPatch, make_dialog: Callable):
    """Replace the terminal dialog with one answering from a list."""
    choices: list[int] = []
    dialog = make_dialog(choices)
    monkeypatch.setattr("toolmeter.cli.utils.ConsoleDialog", lambda **kwargs: dialog)
    return choices


class TestConsentCommands:
    def test_enable_persists_choice_and_cookies(self, tmp_path: Path, quiet_console: Console):
        consent_commands.enable(namespace=NAMESPACE, project=tmp_path)

        consent = load_consent(NAMESPACE, tmp_path)
        assert consent.state is ConsentState.GRANTED
        assert consent.cookie
        assert consent.system_cookie
        assert (tmp_path / ".toolmeter" / "settings.json").exists()
        assert (tmp_path / "system" / "settings.json").exists()
        assert "Telemetry enabled" in quiet_console.export_text()

    def test_disable(self, tmp_path: Path, quiet_console: Console):
        consent_commands.disable(namespace=NAMESPACE, project=tmp_path)
        consent = load_consent(NAMESPACE, tmp_path)
        assert consent.state is ConsentState.DECLINED
        assert consent.cookie == ""

    def test_reset(self, tmp_path: Path, quiet_console: Console):
        consent_commands.enable(namespace=NAMESPACE, project=tmp_path)
        consent_commands.reset(namespace=NAMESPACE, project=tmp_path)
        consent = load_consent(NAMESPACE, tmp_path)
        assert consent.state is ConsentState.FRESH_INSTALL
        assert consent.cookie == ""
        assert consent.system_cookie == ""

    def test_prompt_records_answer(
        self, tmp_path: Path, quiet_console: Console, scripted_console_dialog: list[int]
    ):
        scripted_console_dialog.append(ConsentOption.NO)
        consent_commands.prompt(namespace=NAMESPACE, project=tmp_path)
        assert scripted_console_dialog == []
        assert load_consent(NAMESPACE, tmp_path).state is ConsentState.DECLINED
        assert "declined" in quiet_console.export_text()

    def test_prompt_skipped_when_already_answered(
        self, tmp_path: Path, quiet_console: Console, scripted_console_dialog: list[int]
    ):
        consent_commands.enable(namespace=NAMESPACE, project=tmp_path)
        consent_commands.prompt(namespace=NAMESPACE, project=tmp_path)
        assert "already recorded" in quiet_console.export_text()

    def test_prompt_skipped_when_globally_disabled(
        self, tmp_path: Path, quiet_console: Console, scripted_console_dialog: list[int]
    ):
        set_globally_enabled(False)
        consent_commands.prompt(namespace=NAMESPACE, project=tmp_path)
        assert "globally disabled" in quiet_console.export_text()
        assert load_consent(NAMESPACE, tmp_path).state is ConsentState.FRESH_INSTALL


class TestStatus:
    def test_table_shows_state_and_cookies(self, tmp_path: Path, quiet_console: Console):
        consent_commands.enable(namespace=NAMESPACE, project=tmp_path)
        consent = load_consent(NAMESPACE, tmp_path)

        console = Console(record=True, width=160)
        console.print(build_status_table(consent))
        output = console.export_text()

        assert NAMESPACE in output
        assert "granted" in output
        assert consent.cookie in output
        assert consent.system_cookie in output

    def test_fresh_install(self, tmp_path: Path):
        console = Console(record=True, width=160)
        console.print(build_status_table(load_consent(NAMESPACE, tmp_path)))
        output = console.export_text()
        assert "fresh install" in output
        assert "not generated" in output


class TestReportCommand:
    def test_reports_after_consent(self, tmp_path: Path, quiet_console: Console, web_request):
        consent_commands.enable(namespace=NAMESPACE, project=tmp_path)
        report_commands.report(
            "/cli/event", "CLI event", tracking_id="UA-1", namespace=NAMESPACE, project=tmp_path
        )
        assert len(web_request.posted) == 2
        assert "dl=/cli/event?unityPlatform=" in web_request.posted[0][1]
        assert "unityVersion=" not in web_request.posted[0][1]
        assert "Reported /cli/event" in quiet_console.export_text()

    def test_declined_sends_nothing(self, tmp_path: Path, quiet_console: Console, web_request):
        consent_commands.disable(namespace=NAMESPACE, project=tmp_path)
        report_commands.report(
            "/cli/event", "CLI event", tracking_id="UA-1", namespace=NAMESPACE, project=tmp_path
        )
        assert web_request.posted == []
        assert "nothing sent" in quiet_console.export_text()
