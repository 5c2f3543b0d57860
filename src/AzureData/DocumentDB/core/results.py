# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Response envelopes for AzureData DocumentDB operations.

Every client operation returns exactly one envelope, constructed when the
request completes and immutable thereafter:

- :class:`Response`: a single resource (create, get, replace, upsert).
- :class:`ListResponse`: a page of resources (list feeds and queries).
- :class:`DataResponse`: operations without a resource body (delete).

An envelope is either successful (``resource`` set, ``error`` is None) or
failed (``error`` set to an :class:`~AzureData.DocumentDB.core.errors.HttpError`).
Each envelope also carries :class:`RequestDetails` for diagnostics.

Example::

    response = client.get_collection("people", "appdb")
    if response.is_successful:
        print(response.resource.indexing_policy.mode)
    else:
        print(response.error.status_code, response.error.message)

    # Or raise on failure
    collection = client.get_collection("people", "appdb").raise_for_error().resource
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, List, Optional, TypeVar

from .errors import AzureDataError

T = TypeVar("T")


@dataclass(frozen=True)
class RequestDetails:
    """
    HTTP request/response metadata for diagnostics and tracing.

    :param method: HTTP method of the request.
    :type method: :class:`str`
    :param url: Request URL.
    :type url: :class:`str`
    :param status_code: HTTP response status code.
    :type status_code: :class:`int` | None
    :param client_request_id: Client-generated ``x-ms-client-request-id``.
    :type client_request_id: :class:`str` | None
    :param correlation_id: Client-generated correlation ID shared by all requests of one SDK call.
    :type correlation_id: :class:`str` | None
    :param activity_id: Server-returned ``x-ms-activity-id``.
    :type activity_id: :class:`str` | None
    :param request_charge: Request units consumed (``x-ms-request-charge``).
    :type request_charge: :class:`float` | None
    :param session_token: Server-returned ``x-ms-session-token``.
    :type session_token: :class:`str` | None
    :param etag: Server-returned ``etag``.
    :type etag: :class:`str` | None
    :param continuation: ``x-ms-continuation`` token for the next page, if any.
    :type continuation: :class:`str` | None
    :param item_count: ``x-ms-item-count`` for list responses.
    :type item_count: :class:`int` | None
    :param timing_ms: Duration of the request in milliseconds.
    :type timing_ms: :class:`float` | None
    """

    method: str
    url: str
    status_code: Optional[int] = None
    client_request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    activity_id: Optional[str] = None
    request_charge: Optional[float] = None
    session_token: Optional[str] = None
    etag: Optional[str] = None
    continuation: Optional[str] = None
    item_count: Optional[int] = None
    timing_ms: Optional[float] = None


@dataclass(frozen=True)
class ResourceList(Generic[T]):
    """
    A page of resources from a feed or query.

    :param items: Resources in this page, in server order.
    :type items: :class:`list`
    :param rid: ``_rid`` of the parent resource, when returned.
    :type rid: :class:`str` | None
    """

    items: List[T] = field(default_factory=list)
    rid: Optional[str] = None

    @property
    def count(self) -> int:
        """Number of resources in this page."""
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]


@dataclass(frozen=True)
class _Envelope:
    request: Optional[RequestDetails] = None
    error: Optional[AzureDataError] = None

    @property
    def is_successful(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def status_code(self) -> Optional[int]:
        return self.request.status_code if self.request is not None else None

    @property
    def request_charge(self) -> Optional[float]:
        return self.request.request_charge if self.request is not None else None

    def raise_for_error(self):
        """
        Raise the carried error, if any.

        :return: This envelope, for chaining.
        :raises ~AzureData.DocumentDB.core.errors.AzureDataError: If the request failed.
        """
        if self.error is not None:
            raise self.error
        return self


@dataclass(frozen=True)
class Response(_Envelope, Generic[T]):
    """Envelope for operations returning a single resource."""

    resource: Optional[T] = None


@dataclass(frozen=True)
class ListResponse(_Envelope, Generic[T]):
    """Envelope for operations returning a page of resources."""

    resource: Optional[ResourceList[T]] = None

    @property
    def items(self) -> List[T]:
        return list(self.resource.items) if self.resource is not None else []

    @property
    def continuation(self) -> Optional[str]:
        return self.request.continuation if self.request is not None else None

    @property
    def has_more_results(self) -> bool:
        return bool(self.continuation)


@dataclass(frozen=True)
class DataResponse(_Envelope):
    """
    Envelope for operations without a resource body.

    :param data: Raw response body text, usually empty.
    :type data: :class:`str` | None
    """

    data: Optional[str] = None


__all__ = [
    "RequestDetails",
    "ResourceList",
    "Response",
    "ListResponse",
    "DataResponse",
]
