# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""ToolMeter: consent-gated anonymous usage reporting for developer tools.

Example:
    >>> from toolmeter import MeasurementReporter, ProjectSettings
    >>> from toolmeter.ui import ConsoleDialog, open_in_browser
    >>> reporter = MeasurementReporter.create(
    ...     ProjectSettings.from_paths(), "UA-000000-1", "com.example.plugin", "My Plugin",
    ...     "to improve My Plugin", "https://example.com/privacy",
    ...     display_dialog=ConsoleDialog(), open_url=open_in_browser,
    ... )
    >>> reporter.report("/feature/used", "Feature used")
"""

from toolmeter._version import __version__
from toolmeter.consent import (
    ConsentManager,
    ConsentOption,
    ConsentState,
    is_globally_enabled,
    set_globally_enabled,
)
from toolmeter.exceptions import (
    ConfigurationError,
    MissingCapabilityError,
    RequestPendingError,
    SettingsError,
    ToolMeterError,
)
from toolmeter.measurement import HostInfo, MeasurementReporter, WireRequest
from toolmeter.settings import InMemorySettings, JsonFileSettings, ProjectSettings, SettingsScope


__all__ = (
    "ConfigurationError",
    "ConsentManager",
    "ConsentOption",
    "ConsentState",
    "HostInfo",
    "InMemorySettings",
    "JsonFileSettings",
    "MeasurementReporter",
    "MissingCapabilityError",
    "ProjectSettings",
    "RequestPendingError",
    "SettingsError",
    "SettingsScope",
    "ToolMeterError",
    "WireRequest",
    "__version__",
    "is_globally_enabled",
    "set_globally_enabled",
)
