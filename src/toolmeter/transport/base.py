# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Pollable web request contract.

`WebRequest.post` and `WebRequest.get` return immediately with a `RequestStatus`
handle. Callers poll `complete` and only read `result`, `headers` and `status`
once it is True. Failures are completed handles with a non-success status, never
exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Protocol, runtime_checkable


type FormFields = Iterable[tuple[str, str]]

# Status carried by handles whose request never produced an HTTP response.
NO_RESPONSE_STATUS = 0


@runtime_checkable
class RequestStatus(Protocol):
    """Handle for an in-flight or finished request."""

    @property
    def complete(self) -> bool:
        """Whether the request has finished."""
        ...

    @property
    def result(self) -> bytes:
        """Response body. Valid once complete."""
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        """Response headers. Valid once complete."""
        ...

    @property
    def status(self) -> int:
        """HTTP status code, or 0 if no response was received. Valid once complete."""
        ...


@runtime_checkable
class WebRequest(Protocol):
    """Issues non-blocking GET and POST requests."""

    def post(
        self, url: str, headers: Mapping[str, str] | None, form_fields: FormFields
    ) -> RequestStatus:
        """Start a form-encoded POST and return its handle without waiting."""
        ...

    def get(self, url: str, headers: Mapping[str, str] | None) -> RequestStatus:
        """Start a GET and return its handle without waiting."""
        ...


@dataclass(frozen=True)
class CompletedRequestStatus:
    """A request handle that is already complete."""

    status: int = HTTPStatus.OK
    result: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return True

    @property
    def succeeded(self) -> bool:
        return HTTPStatus.OK <= self.status < HTTPStatus.MULTIPLE_CHOICES


__all__ = (
    "NO_RESPONSE_STATUS",
    "CompletedRequestStatus",
    "FormFields",
    "RequestStatus",
    "WebRequest",
)
