# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import dataclasses

import pytest

from AzureData.DocumentDB.core.errors import HttpError
from AzureData.DocumentDB.core.results import (
    DataResponse,
    ListResponse,
    RequestDetails,
    ResourceList,
    Response,
)


def _details(status=200, continuation=None, charge=2.5):
    return RequestDetails(
        method="GET",
        url="https://myaccount.documents.azure.com/dbs",
        status_code=status,
        request_charge=charge,
        continuation=continuation,
    )


class TestResponse:
    def test_successful_response(self):
        resp = Response(request=_details(201), resource="db")
        assert resp.is_successful
        assert not resp.is_error
        assert resp.status_code == 201
        assert resp.request_charge == 2.5
        assert resp.raise_for_error() is resp

    def test_failed_response_raises_on_demand(self):
        err = HttpError("Conflict", status_code=409)
        resp = Response(request=_details(409), error=err)
        assert resp.is_error
        assert resp.resource is None
        with pytest.raises(HttpError) as info:
            resp.raise_for_error()
        assert info.value is err

    def test_envelopes_are_immutable(self):
        resp = Response(request=_details(), resource="x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            resp.resource = "y"

    def test_no_request_details(self):
        resp = DataResponse()
        assert resp.status_code is None
        assert resp.request_charge is None


class TestListResponse:
    def test_items_and_count(self):
        page = ListResponse(request=_details(), resource=ResourceList(items=["a", "b"], rid="rid=="))
        assert page.items == ["a", "b"]
        assert page.resource.count == 2
        assert len(page.resource) == 2
        assert list(page.resource) == ["a", "b"]
        assert page.resource[1] == "b"
        assert page.resource.rid == "rid=="

    def test_continuation(self):
        page = ListResponse(request=_details(continuation="token-1"), resource=ResourceList(items=[]))
        assert page.continuation == "token-1"
        assert page.has_more_results

    def test_last_page(self):
        page = ListResponse(request=_details(), resource=ResourceList(items=["a"]))
        assert page.continuation is None
        assert not page.has_more_results

    def test_failed_page_has_no_items(self):
        page = ListResponse(request=_details(404), error=HttpError("Not Found", status_code=404))
        assert page.items == []


class TestDataResponse:
    def test_data(self):
        resp = DataResponse(request=_details(204), data=None)
        assert resp.is_successful
        assert resp.data is None
