# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Mapping of raw REST outcomes onto response envelopes."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from ..core.results import DataResponse, ListResponse, ResourceList, Response
from ..data._rest import _RawResponse

T = TypeVar("T")


def _single(raw: _RawResponse, parse: Callable[[Any], T]) -> Response[T]:
    if raw.error is not None:
        return Response(request=raw.details, error=raw.error)
    return Response(request=raw.details, resource=parse(raw.body or {}))


def _page(raw: _RawResponse, list_key: str, parse: Callable[[Any], T]) -> ListResponse[T]:
    if raw.error is not None:
        return ListResponse(request=raw.details, error=raw.error)
    body = raw.body if isinstance(raw.body, dict) else {}
    items = [parse(item) for item in body.get(list_key) or []]
    return ListResponse(request=raw.details, resource=ResourceList(items=items, rid=body.get("_rid")))


def _data(raw: _RawResponse) -> DataResponse:
    return DataResponse(request=raw.details, error=raw.error, data=raw.text or None)
