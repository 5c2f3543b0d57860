# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured error types for the AzureData DocumentDB SDK.

Server failures are not raised by the client operations; they are carried in
the ``error`` field of a response envelope and can be raised on demand with
``response.raise_for_error()``. Client-side misuse raises
:class:`ValidationError` immediately.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class AzureDataError(Exception):
    """
    Base error of the SDK.

    :param message: Human-readable description; also ``str(error)``.
    :param code: Error family, ``"validation_error"`` or ``"http_error"``.
    :param subcode: Finer classification from :mod:`~AzureData.DocumentDB.core._error_codes`.
    :param status_code: HTTP status, for errors that came from the service.
    :param details: Extra diagnostic values.
    :param is_transient: Whether repeating the same call may succeed.
    """

    source = "client"

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.is_transient = is_transient
        self.timestamp = _utc_now()
        self._details = dict(details or {})

    @property
    def details(self) -> Dict[str, Any]:
        return self._details

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form for logs and diagnostics."""
        out: Dict[str, Any] = {"source": self.source, "timestamp": self.timestamp}
        for name in ("code", "subcode", "status_code", "message", "is_transient"):
            out[name] = getattr(self, name)
        out["details"] = self.details
        return out

    def __repr__(self) -> str:  # pragma: no cover
        return f"<{type(self).__name__} {self.code}/{self.subcode}: {self.message}>"


class ValidationError(AzureDataError):
    """An argument or document cannot be sent as given."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details)


class HttpError(AzureDataError):
    """
    Error returned by the service for a non-success HTTP status.

    The Cosmos DB response fields are kept as attributes; :attr:`details` lists
    the ones that were present.

    :param message: Message from the service error body, or a generic status message.
    :type message: :class:`str`
    :param status_code: HTTP status code of the response.
    :type status_code: :class:`int`
    :param service_error_code: The ``code`` field of the service error body (e.g. ``"BadRequest"``).
    :type service_error_code: :class:`str` | None
    :param activity_id: Server-returned ``x-ms-activity-id``; quote it in support requests.
    :type activity_id: :class:`str` | None
    :param client_request_id: ``x-ms-client-request-id`` sent with the failed request.
    :type client_request_id: :class:`str` | None
    :param request_charge: Request units consumed by the failed request.
    :type request_charge: :class:`float` | None
    :param body_excerpt: Start of a non-JSON error body.
    :type body_excerpt: :class:`str` | None
    :param retry_after_ms: Server-suggested wait before retrying, in milliseconds.
    :type retry_after_ms: :class:`int` | None
    """

    source = "server"

    _DETAIL_FIELDS = (
        "service_error_code",
        "activity_id",
        "client_request_id",
        "request_charge",
        "body_excerpt",
        "retry_after_ms",
    )

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        activity_id: Optional[str] = None,
        client_request_id: Optional[str] = None,
        request_charge: Optional[float] = None,
        body_excerpt: Optional[str] = None,
        retry_after_ms: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=details,
            is_transient=is_transient,
        )
        self.service_error_code = service_error_code
        self.activity_id = activity_id
        self.client_request_id = client_request_id
        self.request_charge = request_charge
        self.body_excerpt = body_excerpt
        self.retry_after_ms = retry_after_ms

    @property
    def details(self) -> Dict[str, Any]:
        out = dict(self._details)
        for name in self._DETAIL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_precondition_failed(self) -> bool:
        """True when an ``If-Match`` etag no longer matched."""
        return self.status_code == 412

    @property
    def is_throttled(self) -> bool:
        return self.status_code == 429


__all__ = ["AzureDataError", "HttpError", "ValidationError"]
