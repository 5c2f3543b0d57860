# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from AzureData.DocumentDB.core.errors import HttpError, ValidationError
from AzureData.DocumentDB.models.database import Database
from AzureData.DocumentDB.models.partition import PartitionKeyDefinition
from AzureData.DocumentDB.operations.databases import DatabaseOperations
from tests.unit.test_helpers import make_client

BASE = "https://myaccount.documents.azure.com"


class TestDatabaseOperations(unittest.TestCase):
    """Unit tests for the client.databases namespace."""

    def test_namespace_exists(self):
        client, _ = make_client()
        self.assertIsInstance(client.databases, DatabaseOperations)

    def test_create(self):
        client, http = make_client([(201, {"x-ms-request-charge": "4.95"}, {"id": "appdb", "_rid": "r=="})])

        resp = client.databases.create("appdb")

        method, url, _ = http.calls[0]
        self.assertEqual((method, url), ("post", f"{BASE}/dbs"))
        self.assertEqual(http.body(), {"id": "appdb"})
        self.assertNotIn("x-ms-offer-throughput", http.headers())
        self.assertTrue(resp.is_successful)
        self.assertIsInstance(resp.resource, Database)
        self.assertEqual(resp.resource.id, "appdb")
        self.assertEqual(resp.request_charge, 4.95)
        self.assertIs(resp.resource._client, client)

    def test_create_with_throughput(self):
        client, http = make_client([(201, {}, {"id": "appdb"})])
        client.databases.create("appdb", throughput=400)
        self.assertEqual(http.headers()["x-ms-offer-throughput"], "400")

    def test_create_conflict_returned_in_envelope(self):
        client, _ = make_client([(409, {}, {"code": "Conflict", "message": "Resource with specified id already exists."})])

        resp = client.databases.create("appdb")

        self.assertTrue(resp.is_error)
        self.assertIsNone(resp.resource)
        self.assertEqual(resp.error.status_code, 409)
        with self.assertRaises(HttpError):
            resp.raise_for_error()

    def test_invalid_id_raises_before_request(self):
        client, http = make_client()
        with self.assertRaises(ValidationError):
            client.databases.create("bad/id")
        self.assertEqual(http.calls, [])

    def test_get(self):
        client, http = make_client([(200, {}, {"id": "appdb"})])
        resp = client.databases.get("appdb")
        self.assertEqual(http.calls[0][:2], ("get", f"{BASE}/dbs/appdb"))
        self.assertEqual(resp.resource.id, "appdb")

    def test_list_page(self):
        client, http = make_client(
            [(200, {"x-ms-continuation": "next"}, {"_rid": "", "Databases": [{"id": "a"}, {"id": "b"}], "_count": 2})]
        )

        page = client.databases.list(max_per_page=2)

        self.assertEqual(http.calls[0][:2], ("get", f"{BASE}/dbs"))
        self.assertEqual(http.headers()["x-ms-max-item-count"], "2")
        self.assertEqual([d.id for d in page.items], ["a", "b"])
        self.assertEqual(page.resource.count, 2)
        self.assertTrue(page.has_more_results)

    def test_list_with_continuation(self):
        client, http = make_client([(200, {}, {"Databases": []})])
        page = client.databases.list(continuation="next")
        self.assertEqual(http.headers()["x-ms-continuation"], "next")
        self.assertFalse(page.has_more_results)

    def test_delete_by_id_and_instance(self):
        client, http = make_client([(204, {}, ""), (204, {}, "")])

        first = client.databases.delete("appdb")
        second = client.databases.delete(Database(id="otherdb"))

        self.assertEqual(http.calls[0][:2], ("delete", f"{BASE}/dbs/appdb"))
        self.assertEqual(http.calls[1][:2], ("delete", f"{BASE}/dbs/otherdb"))
        self.assertTrue(first.is_successful)
        self.assertIsNone(second.data)

    def test_delete_forgets_cached_partition_keys(self):
        client, _ = make_client([(204, {}, "")])
        rest = client._get_rest()
        rest._remember_partition_key("appdb", "people", PartitionKeyDefinition.from_path("/testKey"))

        client.databases.delete("appdb")

        self.assertEqual(rest._partition_key_cache, {})

    def test_delete_not_found(self):
        client, _ = make_client([(404, {}, {"code": "NotFound", "message": "Resource Not Found"})])
        resp = client.databases.delete("missing")
        self.assertEqual(resp.error.status_code, 404)
