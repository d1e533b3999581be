# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Non-blocking, pollable web requests."""

from __future__ import annotations

from toolmeter.transport.base import (
    NO_RESPONSE_STATUS,
    CompletedRequestStatus,
    FormFields,
    RequestStatus,
    WebRequest,
)
from toolmeter.transport.http import (
    FutureRequestStatus,
    HttpxWebRequest,
    PoolLimits,
    PoolTimeouts,
    get_default_web_request,
    reset_default_web_request,
    set_default_web_request,
)


__all__ = (
    "NO_RESPONSE_STATUS",
    "CompletedRequestStatus",
    "FormFields",
    "FutureRequestStatus",
    "HttpxWebRequest",
    "PoolLimits",
    "PoolTimeouts",
    "RequestStatus",
    "WebRequest",
    "get_default_web_request",
    "reset_default_web_request",
    "set_default_web_request",
)
