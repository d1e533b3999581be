# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Consent and anonymous identity for one installation.

An installation starts out enabled but unasked (opt-out model). The first time
something wants to report, the user is asked once: "Yes" grants consent and
creates the anonymous cookies, "No" turns reporting off, and "Privacy Policy"
opens the policy and asks again. The answer is persisted immediately.

A process-wide switch sits above all of this. When it is off nothing is
prompted, generated or sent.
"""

from __future__ import annotations

import logging
import threading
import uuid

from collections.abc import Callable
from enum import IntEnum, StrEnum

from toolmeter.config import get_telemetry_settings
from toolmeter.exceptions import MissingCapabilityError
from toolmeter.settings import ProjectSettings, SettingsScope


logger = logging.getLogger(__name__)

type DisplayDialog = Callable[[str, str, str, str, str], int]
"""Show `(title, message, option0, option1, option2)` and return the chosen index."""

type OpenUrl = Callable[[str], None]
"""Open a link in the user's browser."""


_global_lock = threading.Lock()
_globally_enabled: bool | None = None


def is_globally_enabled() -> bool:
    """Whether reporting is allowed anywhere in this process.

    Unless overridden with `set_globally_enabled`, this follows
    `TelemetrySettings.globally_enabled` (env kill-switch and CI detection).
    """
    with _global_lock:
        override = _globally_enabled
    if override is not None:
        return override
    return get_telemetry_settings().globally_enabled


def set_globally_enabled(enabled: bool | None) -> None:
    """Force reporting on or off for the whole process; None restores the configured default."""
    global _globally_enabled
    with _global_lock:
        _globally_enabled = enabled
    logger.debug("Global telemetry switch set to %s", enabled)


class ConsentState(StrEnum):
    """Where an installation is in the consent flow."""

    FRESH_INSTALL = "fresh_install"
    """Not asked yet. Reporting is allowed once the user says yes."""
    GRANTED = "granted"
    """The user agreed to reporting."""
    DECLINED = "declined"
    """The user refused. Nothing is reported until re-enabled or reset."""


class ConsentOption(IntEnum):
    """Indices of the consent dialog buttons."""

    YES = 0
    NO = 1
    PRIVACY_POLICY = 2


class ConsentManager:
    """
    Owns the consent flags and identity cookies of one installation.

    Consent flags and the project cookie live in the project scope, the system
    cookie in the system scope. Every check-prompt-generate-persist sequence
    holds the manager's lock so concurrent callers never mint two cookies.

    Example:
        >>> consent = ConsentManager(settings, "com.example.plugin", "My Plugin",
        ...                          "to improve My Plugin", "https://example.com/privacy",
        ...                          display_dialog=ConsoleDialog(), open_url=open_in_browser)
        >>> if consent.may_report():
        ...     ...
    """

    def __init__(
        self,
        settings: ProjectSettings,
        settings_namespace: str,
        plugin_name: str,
        data_collection_description: str,
        privacy_policy_url: str,
        *,
        display_dialog: DisplayDialog | None = None,
        open_url: OpenUrl | None = None,
    ) -> None:
        """
        Initialize consent management for a plugin.

        Args:
            settings: Project and system settings stores
            settings_namespace: Prefix for every persisted key, e.g. "com.example.plugin"
            plugin_name: Name shown in the consent dialog
            data_collection_description: Why data is collected, e.g. "to improve My Plugin"
            privacy_policy_url: Link opened by the "Privacy Policy" option
            display_dialog: Host dialog capability, required before prompting
            open_url: Host URL-opening capability, required to show the privacy policy
        """
        self.settings = settings
        self.settings_namespace = settings_namespace
        self.plugin_name = plugin_name
        self.data_collection_description = data_collection_description
        self.privacy_policy_url = privacy_policy_url
        self.display_dialog = display_dialog
        self.open_url = open_url
        self._lock = threading.RLock()

        self.enabled_key = f"{settings_namespace}.analytics_enabled"
        self.consent_requested_key = f"{settings_namespace}.analytics_consent_requested"
        self.cookie_key = f"{settings_namespace}.analytics_cookie"
        self.system_cookie_key = f"{settings_namespace}.analytics_system_cookie"

    # ------------------------------------------------------------------
    # Persisted state
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        """Whether this installation may send events. True until the user declines."""
        return self.settings.get_bool(self.enabled_key, default=True)

    @enabled.setter
    def enabled(self, value: bool) -> None:
        # An explicit assignment is an explicit choice.
        with self._lock:
            self._record_choice(enabled=value)

    @property
    def consent_requested(self) -> bool:
        """Whether the user has already answered the consent prompt."""
        return self.settings.get_bool(self.consent_requested_key, default=False)

    @property
    def cookie(self) -> str:
        """Anonymous project-scope identifier, empty until consent is granted."""
        return self.settings.get_str(self.cookie_key, scope=SettingsScope.PROJECT)

    @property
    def system_cookie(self) -> str:
        """Anonymous system-scope identifier, empty until consent is granted."""
        return self.settings.get_str(self.system_cookie_key, scope=SettingsScope.SYSTEM)

    @property
    def state(self) -> ConsentState:
        if not self.consent_requested:
            return ConsentState.FRESH_INSTALL
        return ConsentState.GRANTED if self.enabled else ConsentState.DECLINED

    # ------------------------------------------------------------------
    # Dialog text
    # ------------------------------------------------------------------

    @property
    def dialog_title(self) -> str:
        return f"Enable Analytics for {self.plugin_name}"

    @property
    def dialog_message(self) -> str:
        return (
            f"Would you like to share anonymous usage data about {self.plugin_name} "
            f"{self.data_collection_description}?\n\n"
            f"This data never includes your code or personal information. "
            f"You can change this choice at any time.\n\n"
            f"Privacy policy: {self.privacy_policy_url}"
        )

    dialog_options: tuple[str, str, str] = ("Yes", "No", "Privacy Policy")

    # ------------------------------------------------------------------
    # Flow
    # ------------------------------------------------------------------

    def may_report(self) -> bool:
        """
        Check whether an event may be sent, prompting for consent on first use.

        Returns:
            True if the global switch is on and the user has granted consent
            (possibly just now).
        """
        if not is_globally_enabled():
            return False
        with self._lock:
            if not self.enabled:
                return False
            if not self.consent_requested:
                self._prompt()
            return self.state is ConsentState.GRANTED

    def prompt_to_enable(self) -> None:
        """
        Ask the user for consent unless they have already answered.

        Does nothing when reporting is globally disabled.

        Raises:
            MissingCapabilityError: no dialog, or no URL opener when the privacy
                policy is requested.
            ValueError: the dialog returned an index other than 0, 1 or 2.
        """
        if not is_globally_enabled():
            logger.debug("Telemetry globally disabled, not prompting for consent")
            return
        with self._lock:
            if self.consent_requested:
                return
            self._prompt()

    def _prompt(self) -> None:
        if self.display_dialog is None:
            raise MissingCapabilityError(
                "display_dialog", details={"settings_namespace": self.settings_namespace}
            )
        while True:
            choice = self.display_dialog(self.dialog_title, self.dialog_message, *self.dialog_options)
            match choice:
                case ConsentOption.YES:
                    self._record_choice(enabled=True)
                    return
                case ConsentOption.NO:
                    self._record_choice(enabled=False)
                    return
                case ConsentOption.PRIVACY_POLICY:
                    if self.open_url is None:
                        raise MissingCapabilityError(
                            "open_url", details={"settings_namespace": self.settings_namespace}
                        )
                    self.open_url(self.privacy_policy_url)
                case _:
                    raise ValueError(f"Consent dialog returned unknown option {choice!r}")

    def _record_choice(self, *, enabled: bool) -> None:
        self.settings.set_bool(self.enabled_key, enabled)
        self.settings.set_bool(self.consent_requested_key, True)
        if enabled:
            self._ensure_cookies()
        self._persist()
        logger.info(
            "Analytics %s for %s", "enabled" if enabled else "disabled", self.settings_namespace
        )

    def _ensure_cookies(self) -> None:
        if not self.cookie:
            self.settings.set_str(self.cookie_key, generate_cookie(), scope=SettingsScope.PROJECT)
        if not self.system_cookie:
            self.settings.set_str(
                self.system_cookie_key, generate_cookie(), scope=SettingsScope.SYSTEM
            )

    def _persist(self) -> None:
        self.settings.persist(SettingsScope.PROJECT)
        self.settings.persist(SettingsScope.SYSTEM)

    def restore_default_settings(self) -> None:
        """Forget the user's answer and both cookies; the next report prompts again."""
        with self._lock:
            self.settings.delete_keys(
                (self.enabled_key, self.consent_requested_key, self.cookie_key),
                scope=SettingsScope.PROJECT,
            )
            self.settings.delete_keys((self.system_cookie_key,), scope=SettingsScope.SYSTEM)
            self._persist()
        logger.info("Analytics settings restored to defaults for %s", self.settings_namespace)


def generate_cookie() -> str:
    """Create a new random anonymous identifier."""
    return uuid.uuid4().hex


__all__ = (
    "ConsentManager",
    "ConsentOption",
    "ConsentState",
    "DisplayDialog",
    "OpenUrl",
    "generate_cookie",
    "is_globally_enabled",
    "set_globally_enabled",
)
