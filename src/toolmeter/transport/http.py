# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""httpx-backed implementation of the pollable web request contract.

Requests are queued to a few daemon worker threads sharing one pooled
`httpx.Client`, so `post` and `get` return as soon as the work is queued.
Daemon workers never hold up interpreter exit: hits still queued when the
host exits are dropped. Call `close(wait=True)` to deliver them first.

Usage:
    from toolmeter.transport import get_default_web_request

    request = get_default_web_request()
    handle = request.post(url, None, [("v", "1")])
    ...
    if handle.complete and handle.status == 200:
        ...

Thread Safety:
    - Default instance initialization: double-checked locking (threading.Lock)
    - Client creation: double-checked locking (threading.Lock)
    - Worker start-up and shutdown: guarded by threading.Lock
    - Handles may be polled from any thread
"""

from __future__ import annotations

import logging
import queue
import threading

from collections.abc import Mapping
from concurrent.futures import CancelledError, Future
from dataclasses import dataclass
from types import TracebackType
from typing import Self
from urllib.parse import urlencode

import httpx

from toolmeter._version import __version__
from toolmeter.exceptions import RequestPendingError
from toolmeter.transport.base import (
    NO_RESPONSE_STATUS,
    CompletedRequestStatus,
    FormFields,
    WebRequest,
)


logger = logging.getLogger(__name__)

# Module-level lock for thread-safe default instance initialization
_instance_lock = threading.Lock()

USER_AGENT = f"toolmeter/{__version__}"


@dataclass(frozen=True)
class PoolLimits:
    """HTTP connection pool limits configuration.

    Attributes:
        max_connections: Maximum total connections across all hosts.
        max_keepalive_connections: Maximum persistent connections to keep alive.
        keepalive_expiry: Seconds to keep idle connections alive.
    """

    max_connections: int = 10
    max_keepalive_connections: int = 2
    keepalive_expiry: float = 5.0


@dataclass(frozen=True)
class PoolTimeouts:
    """HTTP timeout configuration for the pooled client.

    Attributes:
        connect: Connection establishment timeout in seconds.
        read: Read timeout in seconds.
        write: Write timeout in seconds.
        pool: Pool acquire timeout in seconds.
    """

    connect: float = 10.0
    read: float = 10.0
    write: float = 10.0
    pool: float = 5.0

    @classmethod
    def uniform(cls, seconds: float) -> PoolTimeouts:
        """Use the same timeout for every phase."""
        return cls(connect=seconds, read=seconds, write=seconds, pool=seconds)


class FutureRequestStatus:
    """Request handle backed by a `concurrent.futures.Future`."""

    def __init__(self, future: Future[CompletedRequestStatus]) -> None:
        self._future = future

    @property
    def complete(self) -> bool:
        return self._future.done()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the request finishes or `timeout` elapses. Returns `complete`."""
        try:
            self._future.exception(timeout=timeout)
        except TimeoutError:
            return False
        except CancelledError:
            pass
        return True

    def _outcome(self) -> CompletedRequestStatus:
        if not self._future.done():
            raise RequestPendingError("Request handle read before the request completed")
        if self._future.cancelled():
            return CompletedRequestStatus(status=NO_RESPONSE_STATUS)
        if (exc := self._future.exception()) is not None:
            logger.debug("Request worker failed: %r", exc)
            return CompletedRequestStatus(status=NO_RESPONSE_STATUS)
        return self._future.result()

    @property
    def result(self) -> bytes:
        return self._outcome().result

    @property
    def headers(self) -> Mapping[str, str]:
        return self._outcome().headers

    @property
    def status(self) -> int:
        return self._outcome().status


@dataclass(frozen=True)
class _QueuedRequest:
    future: Future[CompletedRequestStatus]
    method: str
    url: str
    headers: dict[str, str]
    body: str | None


class HttpxWebRequest(WebRequest):
    """Non-blocking web requests delivered by `httpx` on worker threads.

    Example:
        with HttpxWebRequest(timeouts=PoolTimeouts.uniform(5.0)) as request:
            handle = request.get("https://example.com", None)
    """

    def __init__(
        self,
        *,
        limits: PoolLimits | None = None,
        timeouts: PoolTimeouts | None = None,
        max_workers: int = 2,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the request dispatcher.

        Args:
            limits: Connection pool limits for the lazily created client
            timeouts: Timeouts for the lazily created client
            max_workers: Worker threads performing requests
            client: Pre-built client to use instead of creating one
        """
        self.limits = limits or PoolLimits()
        self.timeouts = timeouts or PoolTimeouts()
        self._client = client
        self._client_lock = threading.Lock()
        self.max_workers = max_workers
        self._queue: queue.SimpleQueue[_QueuedRequest | None] = queue.SimpleQueue()
        self._workers: list[threading.Thread] = []
        self._workers_lock = threading.Lock()
        self._closed = False

    @property
    def client(self) -> httpx.Client:
        """The pooled client, created on first use."""
        if self._client is not None:
            return self._client
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    limits=httpx.Limits(
                        max_connections=self.limits.max_connections,
                        max_keepalive_connections=self.limits.max_keepalive_connections,
                        keepalive_expiry=self.limits.keepalive_expiry,
                    ),
                    timeout=httpx.Timeout(
                        connect=self.timeouts.connect,
                        read=self.timeouts.read,
                        write=self.timeouts.write,
                        pool=self.timeouts.pool,
                    ),
                    headers={"User-Agent": USER_AGENT},
                )
                logger.debug(
                    "Created HTTP client: max_conn=%d, read_timeout=%.1fs",
                    self.limits.max_connections,
                    self.timeouts.read,
                )
        return self._client

    def post(
        self, url: str, headers: Mapping[str, str] | None, form_fields: FormFields
    ) -> FutureRequestStatus:
        body = urlencode(list(form_fields))
        request_headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            **(headers or {}),
        }
        return self._submit("POST", url, request_headers, body)

    def get(self, url: str, headers: Mapping[str, str] | None) -> FutureRequestStatus:
        return self._submit("GET", url, dict(headers or {}), None)

    def _submit(
        self, method: str, url: str, headers: dict[str, str], body: str | None
    ) -> FutureRequestStatus:
        future: Future[CompletedRequestStatus] = Future()
        with self._workers_lock:
            if self._closed:
                logger.debug("Dropping %s %s: web request is closed", method, url)
                future.cancel()
                return FutureRequestStatus(future)
            self._start_workers()
            self._queue.put(_QueuedRequest(future, method, url, headers, body))
        return FutureRequestStatus(future)

    def _start_workers(self) -> None:
        # Caller holds _workers_lock
        while len(self._workers) < self.max_workers:
            worker = threading.Thread(
                target=self._work,
                name=f"toolmeter-request-{len(self._workers)}",
                daemon=True,
            )
            worker.start()
            self._workers.append(worker)

    def _work(self) -> None:
        while (item := self._queue.get()) is not None:
            if not item.future.set_running_or_notify_cancel():
                continue
            try:
                item.future.set_result(
                    self._perform(item.method, item.url, item.headers, item.body)
                )
            except Exception as e:
                item.future.set_exception(e)

    def _perform(
        self, method: str, url: str, headers: dict[str, str], body: str | None
    ) -> CompletedRequestStatus:
        try:
            response = self.client.request(method, url, headers=headers, content=body)
        except (httpx.HTTPError, OSError) as e:
            logger.debug("%s %s failed: %s", method, url, e)
            return CompletedRequestStatus(status=NO_RESPONSE_STATUS)
        logger.debug("%s %s -> %d", method, url, response.status_code)
        return CompletedRequestStatus(
            status=response.status_code,
            result=response.content,
            headers=dict(response.headers),
        )

    def _drop_queued(self) -> int:
        dropped = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return dropped
            if item is not None and item.future.cancel():
                dropped += 1

    def close(self, *, wait: bool = False) -> None:
        """Stop accepting work and close the HTTP client.

        Args:
            wait: Block until queued requests have been delivered. Otherwise
                queued requests are dropped and complete with no response.
        """
        with self._workers_lock:
            self._closed = True
            workers = list(self._workers)
            self._workers.clear()
        if not wait and (dropped := self._drop_queued()):
            logger.debug("Dropped %d queued requests on close", dropped)
        for _ in workers:
            self._queue.put(None)
        if wait:
            for worker in workers:
                worker.join()
        with self._client_lock:
            if self._client is not None:
                try:
                    self._client.close()
                except (httpx.HTTPError, OSError) as e:
                    logger.warning("Error closing HTTP client: %s", e)
                self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close(wait=True)


_default_instance: WebRequest | None = None


def get_default_web_request() -> WebRequest:
    """Get the process-wide web request, creating an `HttpxWebRequest` from settings if needed."""
    global _default_instance
    # Fast path: instance already exists
    if _default_instance is not None:
        return _default_instance

    # Slow path: acquire lock and double-check
    with _instance_lock:
        if _default_instance is None:
            from toolmeter.config import get_telemetry_settings

            settings = get_telemetry_settings()
            _default_instance = HttpxWebRequest(
                timeouts=PoolTimeouts.uniform(settings.request_timeout_seconds),
                max_workers=settings.max_workers,
            )
            logger.debug("Created default web request")
    return _default_instance


def set_default_web_request(web_request: WebRequest | None) -> None:
    """Replace the process-wide web request (None restores lazy creation)."""
    global _default_instance
    with _instance_lock:
        _default_instance = web_request


def reset_default_web_request(*, wait: bool = False) -> None:
    """Close and forget the process-wide web request (primarily for testing and shutdown)."""
    global _default_instance
    with _instance_lock:
        instance, _default_instance = _default_instance, None
    if isinstance(instance, HttpxWebRequest):
        instance.close(wait=wait)


__all__ = (
    "USER_AGENT",
    "FutureRequestStatus",
    "HttpxWebRequest",
    "PoolLimits",
    "PoolTimeouts",
    "get_default_web_request",
    "reset_default_web_request",
    "set_default_web_request",
)
