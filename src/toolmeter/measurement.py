# sourcery skip: name-type-suffix
# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Measurement protocol reporter.

Turns "report this event" calls into Google Analytics v1 measurement protocol
pageview hits, one per identity scope (project first, then system), and hands
them to a non-blocking web request. Reporting:
- Is gated on consent (the first report may trigger the consent prompt)
- Never waits for the network
- Never raises because of delivery problems
"""

from __future__ import annotations

import logging
import random

from dataclasses import dataclass
from typing import Self
from urllib.parse import urlsplit

from toolmeter.common.query import (
    QueryParameters,
    build_form_body,
    concatenate_query_strings,
    encode_query_parameters,
    split_report_url,
)
from toolmeter.config import get_telemetry_settings
from toolmeter.consent import ConsentManager, DisplayDialog, OpenUrl
from toolmeter.exceptions import MissingCapabilityError
from toolmeter.settings import ProjectSettings, SettingsScope
from toolmeter.transport import WebRequest, get_default_web_request


logger = logging.getLogger(__name__)

MEASUREMENT_PROTOCOL_VERSION = "1"
HIT_TYPE = "pageview"
CACHE_BUSTER_MAX = 2**31 - 1

# Report order is part of the wire contract.
REPORT_SCOPES: tuple[SettingsScope, ...] = (SettingsScope.PROJECT, SettingsScope.SYSTEM)


@dataclass(frozen=True)
class HostInfo:
    """Identity of the host application embedding the reporter."""

    version: str
    platform: str

    @classmethod
    def from_settings(cls) -> Self:
        settings = get_telemetry_settings()
        return cls(version=settings.host_version, platform=settings.host_platform)


@dataclass(frozen=True)
class WireRequest:
    """One measurement protocol hit: where to POST it and the ordered form fields."""

    url: str
    form_fields: tuple[tuple[str, str], ...]

    @property
    def body(self) -> str:
        """Newline-joined `key=value` rendering of the form fields."""
        return build_form_body(self.form_fields)

    def field(self, key: str) -> str | None:
        return next((value for name, value in self.form_fields if name == key), None)


class MeasurementReporter:
    """
    Consent-gated reporter for anonymous usage events.

    Configuration attributes (`base_path`, `base_query`, `base_report_name`,
    `report_host_version`, `report_host_platform`) may be changed at any time and
    apply to every later report.

    Example:
        >>> reporter = MeasurementReporter.create(
        ...     ProjectSettings.from_paths(), "UA-000000-1", "com.example.plugin",
        ...     "My Plugin", "to improve My Plugin", "https://example.com/privacy",
        ...     display_dialog=ConsoleDialog(), open_url=open_in_browser,
        ... )
        >>> reporter.base_path = "/myplugin"
        >>> reporter.report("/settings/opened", "Settings opened")
    """

    def __init__(
        self,
        tracking_id: str,
        consent: ConsentManager,
        *,
        web_request: WebRequest | None = None,
        host: HostInfo | None = None,
        collect_url: str | None = None,
    ) -> None:
        """
        Initialize the reporter.

        Args:
            tracking_id: Measurement protocol property id (the `tid` field)
            consent: Consent and identity for this installation
            web_request: Transport. Defaults to the process-wide web request at send time.
            host: Host application identity. Defaults to values from settings.
            collect_url: Collection endpoint. Defaults to `TelemetrySettings.collect_url`.
        """
        self.tracking_id = tracking_id
        self.consent = consent
        self._web_request = web_request
        self.host = host or HostInfo.from_settings()
        self.collect_url = collect_url or get_telemetry_settings().collect_url

        self.base_path = ""
        self.base_query: str | None = None
        self.base_report_name = ""
        self.report_host_version = True
        self.report_host_platform = True
        self.host_version_key = "unityVersion"
        self.host_platform_key = "unityPlatform"

        self._random = random.Random()

    @classmethod
    def create(
        cls,
        settings: ProjectSettings,
        tracking_id: str,
        settings_namespace: str,
        plugin_name: str,
        data_collection_description: str,
        privacy_policy_url: str,
        *,
        display_dialog: DisplayDialog | None = None,
        open_url: OpenUrl | None = None,
        web_request: WebRequest | None = None,
        host: HostInfo | None = None,
        collect_url: str | None = None,
    ) -> Self:
        """Build a reporter together with its consent manager."""
        consent = ConsentManager(
            settings,
            settings_namespace,
            plugin_name,
            data_collection_description,
            privacy_policy_url,
            display_dialog=display_dialog,
            open_url=open_url,
        )
        return cls(
            tracking_id, consent, web_request=web_request, host=host, collect_url=collect_url
        )

    # ------------------------------------------------------------------
    # Consent passthrough
    # ------------------------------------------------------------------

    @property
    def web_request(self) -> WebRequest:
        return self._web_request or get_default_web_request()

    @web_request.setter
    def web_request(self, value: WebRequest | None) -> None:
        self._web_request = value

    @property
    def plugin_name(self) -> str:
        return self.consent.plugin_name

    @property
    def data_collection_description(self) -> str:
        return self.consent.data_collection_description

    @property
    def enabled(self) -> bool:
        return self.consent.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.consent.enabled = value

    @property
    def consent_requested(self) -> bool:
        return self.consent.consent_requested

    @property
    def cookie(self) -> str:
        return self.consent.cookie

    @property
    def system_cookie(self) -> str:
        return self.consent.system_cookie

    @property
    def display_dialog(self) -> DisplayDialog | None:
        return self.consent.display_dialog

    @display_dialog.setter
    def display_dialog(self, value: DisplayDialog | None) -> None:
        self.consent.display_dialog = value

    @property
    def open_url_handler(self) -> OpenUrl | None:
        return self.consent.open_url

    @open_url_handler.setter
    def open_url_handler(self, value: OpenUrl | None) -> None:
        self.consent.open_url = value

    def prompt_to_enable(self) -> None:
        self.consent.prompt_to_enable()

    def restore_default_settings(self) -> None:
        self.consent.restore_default_settings()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def report(
        self, report_url: str, report_name: str, *, parameters: QueryParameters | None = None
    ) -> None:
        """
        Report an event if the user has consented.

        Args:
            report_url: Event path, optionally with `?query` and `#anchor`
            report_name: Human-readable title, prefixed with `base_report_name`
            parameters: Extra query parameters appended after the path's own query

        Note:
            Delivery problems are logged, never raised.
        """
        if not self.consent.may_report():
            logger.debug("Reporting not permitted, dropping %s", report_url)
            return
        for request in self.build_wire_requests(report_url, report_name, parameters=parameters):
            self._dispatch(request)

    def open_url(self, url: str, report_name: str) -> None:
        """
        Report that a link was followed, then open it.

        The event path is `/<host><path>` with the link's query and anchor.

        Raises:
            MissingCapabilityError: no URL opener has been configured.
        """
        opener = self.consent.open_url
        if opener is None:
            raise MissingCapabilityError("open_url", details={"url": url})
        parts = urlsplit(url)
        report_url = f"/{parts.hostname or ''}{parts.path}"
        if parts.query:
            report_url = f"{report_url}?{parts.query}"
        if parts.fragment:
            report_url = f"{report_url}#{parts.fragment}"
        self.report(report_url, report_name)
        opener(url)

    def build_wire_requests(
        self, report_url: str, report_name: str, *, parameters: QueryParameters | None = None
    ) -> list[WireRequest]:
        """Build the hits for an event without checking consent or sending anything."""
        path, query, anchor = split_report_url(report_url)
        merged_query = concatenate_query_strings(
            concatenate_query_strings(
                concatenate_query_strings(self._common_query(), self.base_query), query
            ),
            encode_query_parameters(parameters),
        )
        document_path = f"{self.base_path}{path}"
        document_title = f"{self.base_report_name}{report_name}"
        cookies = {SettingsScope.PROJECT: self.cookie, SettingsScope.SYSTEM: self.system_cookie}

        requests = []
        for scope in REPORT_SCOPES:
            scoped_query = concatenate_query_strings(merged_query, f"scope={scope}")
            requests.append(
                WireRequest(
                    url=self.collect_url,
                    form_fields=(
                        ("v", MEASUREMENT_PROTOCOL_VERSION),
                        ("tid", self.tracking_id),
                        ("cid", cookies[scope]),
                        ("t", HIT_TYPE),
                        ("dl", f"{document_path}?{scoped_query}{anchor or ''}"),
                        ("dt", document_title),
                        ("z", str(self._random.randint(0, CACHE_BUSTER_MAX))),
                    ),
                )
            )
        return requests

    def _common_query(self) -> str | None:
        pairs = []
        if self.report_host_version and self.host.version:
            pairs.append((self.host_version_key, self.host.version))
        if self.report_host_platform and self.host.platform:
            pairs.append((self.host_platform_key, self.host.platform))
        return encode_query_parameters(pairs)

    def _dispatch(self, request: WireRequest) -> None:
        logger.debug("Posting measurement to %s:\n%s", request.url, request.body)
        try:
            _ = self.web_request.post(request.url, None, request.form_fields)
        except Exception:
            # Never fail the host application because of telemetry
            logger.warning("Failed to dispatch measurement to %s", request.url, exc_info=True)


__all__ = (
    "HIT_TYPE",
    "MEASUREMENT_PROTOCOL_VERSION",
    "REPORT_SCOPES",
    "HostInfo",
    "MeasurementReporter",
    "WireRequest",
)
