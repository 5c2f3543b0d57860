# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Retrying HTTP transport over :mod:`requests`.

Cosmos DB answers throttled requests with 429 and a ``x-ms-retry-after-ms``
hint, and occasionally asks for a retry with 449 or reports 408/503 while a
partition moves. :class:`_HttpClient` retries those responses (and dropped
connections) with exponential backoff, following the server's hint when
there is one.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Mapping, Optional

import requests

from ..common.constants import HEADER_RETRY_AFTER, HEADER_RETRY_AFTER_MS
from ._error_codes import TRANSIENT_STATUS_CODES

_logger = logging.getLogger(__name__)

# Default timeouts (seconds): writes and queries may fan out across partitions.
_READ_TIMEOUT = 10
_WRITE_TIMEOUT = 60
_WRITE_METHODS = frozenset({"POST", "PUT", "DELETE"})


def _server_retry_hint(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Seconds the service asked us to wait, from ``x-ms-retry-after-ms`` or ``Retry-After``."""
    if not headers:
        return None
    for name, scale in ((HEADER_RETRY_AFTER_MS, 1000.0), (HEADER_RETRY_AFTER, 1.0)):
        raw = headers.get(name)
        if raw is None:
            continue
        try:
            return float(raw) / scale
        except (TypeError, ValueError):
            _logger.debug("Ignoring unparsable %s header %r", name, raw)
    return None


class _HttpClient:
    """
    Sends requests with retries for throttling, transient statuses and network errors.

    :param retries: Total attempts per request, including the first. Default is 5.
    :type retries: :class:`int` | None
    :param backoff: First retry delay in seconds; doubles per attempt. Default is 0.5.
    :type backoff: :class:`float` | None
    :param timeout: Timeout for every request. Default is 10s for reads and 60s for writes.
    :type timeout: :class:`float` | None
    :param max_backoff: Cap on any single delay, including server hints. Default is 60.0.
    :type max_backoff: :class:`float` | None
    :param jitter: Spread computed delays by up to 25% either way. Default is True.
    :type jitter: :class:`bool` | None
    :param retry_transient_errors: Retry 408, 429, 449 and 503. Default is True.
    :type retry_transient_errors: :class:`bool` | None
    :param session: Pooled session to send through; closed by :meth:`close`.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        max_backoff: Optional[float] = None,
        jitter: Optional[bool] = None,
        retry_transient_errors: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.max_attempts = max(1, 5 if retries is None else retries)
        self.base_delay = 0.5 if backoff is None else backoff
        self.max_backoff = 60.0 if max_backoff is None else max_backoff
        self.default_timeout = timeout
        self.jitter = True if jitter is None else jitter
        self.retry_transient_errors = True if retry_transient_errors is None else retry_transient_errors
        self.transient_status_codes = frozenset(TRANSIENT_STATUS_CODES)
        self._session = session

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        sender = self._session.request if self._session is not None else requests.request
        return sender(method, url, **kwargs)

    def _should_retry(self, response: requests.Response) -> bool:
        return self.retry_transient_errors and response.status_code in self.transient_status_codes

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send one logical request, retrying as configured.

        :param method: HTTP verb.
        :type method: :class:`str`
        :param url: Absolute request URL.
        :type url: :class:`str`
        :param kwargs: Passed to :func:`requests.request` (``headers``, ``data``, ``timeout``...).
        :return: The first non-retryable response, or the last response once attempts run out.
        :rtype: :class:`requests.Response`
        :raises requests.exceptions.RequestException: If the final attempt fails to connect.
        """
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                kwargs["timeout"] = _WRITE_TIMEOUT if (method or "").upper() in _WRITE_METHODS else _READ_TIMEOUT

        last_attempt = self.max_attempts - 1
        attempt = 0
        while True:
            try:
                response = self._send(method, url, **kwargs)
            except requests.exceptions.RequestException as exc:
                if attempt >= last_attempt:
                    raise
                delay = self._calculate_retry_delay(attempt)
                _logger.debug("%s %s failed (%s); attempt %d, waiting %.2fs", method, url, exc, attempt + 1, delay)
            else:
                if attempt >= last_attempt or not self._should_retry(response):
                    return response
                delay = self._calculate_retry_delay(attempt, response)
                _logger.debug(
                    "%s %s returned %s; attempt %d, waiting %.2fs",
                    method,
                    url,
                    response.status_code,
                    attempt + 1,
                    delay,
                )
            time.sleep(delay)
            attempt += 1

    def _calculate_retry_delay(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        """
        Seconds to wait before retry number ``attempt + 1``.

        A server hint on ``response`` is used as-is, capped at ``max_backoff``.
        Otherwise the delay is ``base_delay * 2**attempt`` capped at ``max_backoff``,
        with jitter when enabled. Never negative.
        """
        hint = _server_retry_hint(getattr(response, "headers", None)) if response is not None else None
        if hint is not None:
            return max(0.0, min(hint, self.max_backoff))

        delay = min(self.base_delay * (2**attempt), self.max_backoff)
        if self.jitter:
            delay += random.uniform(-0.25 * delay, 0.25 * delay)
        return max(0.0, delay)

    def close(self) -> None:
        """Close the pooled session, if any. Idempotent."""
        session, self._session = self._session, None
        if session is not None:
            session.close()
