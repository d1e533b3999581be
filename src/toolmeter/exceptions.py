# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Exception hierarchy for ToolMeter.

Only programming and configuration mistakes are raised. Network failures are
reported through request handles, and a user declining consent is a normal state.
"""

from __future__ import annotations

from typing import Any


class ToolMeterError(Exception):
    """Base exception for all ToolMeter errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize ToolMeter error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        if not self.details:
            return self.message
        detail_parts = [f"{key.replace('_', ' ')}: {value}" for key, value in self.details.items()]
        return f"{self.message} ({', '.join(detail_parts)})"


class ConfigurationError(ToolMeterError):
    """Configuration and wiring errors.

    Raised when the host has not supplied something ToolMeter needs, or when
    settings are invalid.
    """


class MissingCapabilityError(ConfigurationError):
    """A host capability (dialog or URL opener) was needed but never configured."""

    def __init__(self, capability: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"No {capability} has been configured",
            details={"capability": capability, **(details or {})},
            suggestions=[
                f"Pass a {capability} callable when constructing the reporter",
                f"Or assign one to the `{capability}` attribute before prompting for consent",
            ],
        )
        self.capability = capability


class SettingsError(ToolMeterError):
    """Settings could not be read from or written to their backing store."""


class RequestPendingError(ToolMeterError):
    """A request handle was read before the request completed."""


__all__ = (
    "ConfigurationError",
    "MissingCapabilityError",
    "RequestPendingError",
    "SettingsError",
    "ToolMeterError",
)
