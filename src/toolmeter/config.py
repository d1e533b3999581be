# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Telemetry configuration settings.

Configuration sources (priority order):
1. Explicit keyword arguments (highest priority)
2. Environment variable
3. `.env` file
4. Defaults

Environment Variables:
    TOOLMETER_TELEMETRY_ENABLED: Global kill-switch for all reporting (default: true)
    TOOLMETER_DISABLE_IN_CI: Turn reporting off when a CI environment is detected (default: true)
    TOOLMETER_COLLECT_URL: Measurement protocol endpoint
    TOOLMETER_REQUEST_TIMEOUT_SECONDS: Per-request timeout (default: 10)
    TOOLMETER_MAX_WORKERS: Worker threads used for delivery (default: 2)
    TOOLMETER_HOST_VERSION: Host application version reported with events (default: unset)
    TOOLMETER_HOST_PLATFORM: Host application platform reported with events (default: OS name)
    TOOLMETER_SYSTEM_SETTINGS_DIR: Directory holding system-scope settings
    TOOLMETER_LOG_LEVEL: Log level for the toolmeter logger (default: WARNING)
"""

from __future__ import annotations

import os
import platform

from functools import cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_COLLECT_URL = "http://www.google-analytics.com/collect"

CI_ENVIRONMENT_VARIABLES = ("CI", "GITHUB_ACTIONS", "BUILD_NUMBER", "RUN_ID", "TF_BUILD")


def is_ci() -> bool:
    """Check whether the process appears to be running on a CI service."""
    return any(
        os.environ.get(name, "").strip().lower() not in ("", "0", "false")
        for name in CI_ENVIRONMENT_VARIABLES
    )


class TelemetrySettings(BaseSettings):
    """Telemetry configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLMETER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telemetry_enabled: Annotated[
        bool,
        Field(
            default=True,
            description="Process-wide switch. When False nothing is reported and no consent prompt is shown.",
        ),
    ]

    disable_in_ci: Annotated[
        bool,
        Field(
            default=True,
            description="Force reporting off when a continuous integration environment is detected.",
        ),
    ]

    collect_url: Annotated[
        str,
        Field(
            default=DEFAULT_COLLECT_URL,
            description="Measurement protocol collection endpoint.",
        ),
    ]

    request_timeout_seconds: Annotated[
        PositiveFloat,
        Field(default=10.0, description="Timeout applied to each measurement request."),
    ]

    max_workers: Annotated[
        PositiveInt,
        Field(default=2, description="Number of worker threads delivering requests."),
    ]

    host_version: Annotated[
        str,
        Field(
            default="",
            description="Version of the host application. Empty means unknown and is not reported.",
        ),
    ]

    host_platform: Annotated[
        str,
        Field(
            default_factory=platform.system,
            description="Platform of the host application. Defaults to the operating system name.",
        ),
    ]

    system_settings_dir: Annotated[
        Path | None,
        Field(
            default=None,
            description="Directory for system-scope settings. Defaults to the user config directory.",
        ),
    ]

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(default="WARNING", description="Log level for the toolmeter logger."),
    ]

    @property
    def globally_enabled(self) -> bool:
        """Whether reporting is allowed at all in this process."""
        if not self.telemetry_enabled:
            return False
        return not (self.disable_in_ci and is_ci())


@cache
def get_telemetry_settings() -> TelemetrySettings:
    """Get cached telemetry settings instance."""
    return TelemetrySettings()


def reset_telemetry_settings() -> None:
    """Drop the cached settings so the next lookup re-reads the environment."""
    get_telemetry_settings.cache_clear()


__all__ = (
    "DEFAULT_COLLECT_URL",
    "TelemetrySettings",
    "get_telemetry_settings",
    "is_ci",
    "reset_telemetry_settings",
)
