# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from AzureData.DocumentDB.core.errors import ValidationError
from AzureData.DocumentDB.models.collection import DocumentCollection
from AzureData.DocumentDB.models.indexing import DataType, Index, IndexingMode, IndexingPolicy
from AzureData.DocumentDB.models.partition import PartitionKeyDefinition, PartitionKeyRange
from AzureData.DocumentDB.operations.collections import CollectionOperations
from tests.unit.test_helpers import collection_body, make_client

BASE = "https://myaccount.documents.azure.com"


class TestCollectionOperations(unittest.TestCase):
    """Unit tests for the client.collections namespace."""

    def test_namespace_exists(self):
        client, _ = make_client()
        self.assertIsInstance(client.collections, CollectionOperations)

    def test_create_sends_definition_and_throughput(self):
        client, http = make_client([(201, {}, collection_body())])
        policy = IndexingPolicy(mode=IndexingMode.LAZY).include("/*", Index.range(DataType.NUMBER, -1))

        resp = client.collections.create("people", "/testKey", "appdb", throughput=750, indexing_policy=policy)

        method, url, _ = http.calls[0]
        self.assertEqual((method, url), ("post", f"{BASE}/dbs/appdb/colls"))
        body = http.body()
        self.assertEqual(body["id"], "people")
        self.assertEqual(body["partitionKey"], {"paths": ["/testKey"], "kind": "Hash"})
        self.assertEqual(body["indexingPolicy"]["indexingMode"], "lazy")
        self.assertEqual(http.headers()["x-ms-offer-throughput"], "750")
        self.assertIsInstance(resp.resource, DocumentCollection)
        self.assertEqual(resp.resource.database_id, "appdb")

    def test_create_accepts_definition(self):
        client, http = make_client([(201, {}, collection_body())])
        client.collections.create("people", PartitionKeyDefinition(["/testKey"], version=2), "appdb")
        self.assertEqual(http.body()["partitionKey"]["version"], 2)

    def test_create_remembers_partition_key(self):
        client, _ = make_client([(201, {}, collection_body())])
        client.collections.create("people", "/testKey", "appdb")
        cached = client._get_rest()._partition_key_cache["dbs/appdb/colls/people"]
        self.assertEqual(cached.paths, ["/testKey"])

    def test_server_error_not_cached(self):
        client, _ = make_client([(400, {}, {"code": "BadRequest", "message": "Invalid throughput"})])
        resp = client.collections.create("people", "/testKey", "appdb", throughput=750)
        self.assertEqual(resp.error.status_code, 400)
        self.assertEqual(resp.error.message, "Invalid throughput")
        self.assertEqual(client._get_rest()._partition_key_cache, {})

    def test_invalid_partition_key_path(self):
        client, http = make_client()
        with self.assertRaises(ValidationError):
            client.collections.create("people", "testKey", "appdb")
        self.assertEqual(http.calls, [])

    def test_get(self):
        client, http = make_client([(200, {}, collection_body())])
        resp = client.collections.get("people", "appdb")
        self.assertEqual(http.calls[0][:2], ("get", f"{BASE}/dbs/appdb/colls/people"))
        self.assertEqual(resp.resource.partition_key.paths, ["/testKey"])

    def test_list(self):
        client, http = make_client([(200, {}, {"_rid": "db-rid==", "DocumentCollections": [collection_body()]})])
        page = client.collections.list("appdb")
        self.assertEqual(http.calls[0][:2], ("get", f"{BASE}/dbs/appdb/colls"))
        self.assertEqual(page.resource.rid, "db-rid==")
        self.assertEqual(page.items[0].id, "people")

    def test_replace_instance_sends_new_policy_and_existing_partition_key(self):
        returned = collection_body()
        returned["indexingPolicy"]["indexingMode"] = "lazy"
        client, http = make_client([(200, {}, returned)])
        coll = DocumentCollection.from_api_response(collection_body(), "appdb")
        policy = IndexingPolicy(mode=IndexingMode.LAZY).include("/*")

        resp = client.collections.replace(coll, "appdb", policy)

        method, url, _ = http.calls[0]
        self.assertEqual((method, url), ("put", f"{BASE}/dbs/appdb/colls/people"))
        body = http.body()
        self.assertEqual(body["indexingPolicy"]["indexingMode"], "lazy")
        self.assertEqual(body["partitionKey"]["paths"], ["/testKey"])
        self.assertTrue(policy.is_equivalent_to(resp.resource.indexing_policy))

    def test_replace_by_id_reads_first(self):
        client, http = make_client([(200, {}, collection_body()), (200, {}, collection_body())])

        client.collections.replace("people", "appdb")

        self.assertEqual([c[0] for c in http.calls], ["get", "put"])
        self.assertEqual(http.body()["indexingPolicy"]["indexingMode"], "consistent")
        self.assertEqual(http.headers(0)["x-ms-correlation-id"], http.headers(1)["x-ms-correlation-id"])

    def test_replace_by_id_returns_read_failure(self):
        client, http = make_client([(404, {}, {"code": "NotFound", "message": "Resource Not Found"})])
        resp = client.collections.replace("missing", "appdb")
        self.assertEqual(resp.error.status_code, 404)
        self.assertEqual(len(http.calls), 1)

    def test_delete_forgets_partition_key(self):
        client, http = make_client([(204, {}, "")])
        rest = client._get_rest()
        rest._remember_partition_key("appdb", "people", PartitionKeyDefinition.from_path("/testKey"))

        resp = client.collections.delete("people", "appdb")

        self.assertEqual(http.calls[0][:2], ("delete", f"{BASE}/dbs/appdb/colls/people"))
        self.assertTrue(resp.is_successful)
        self.assertNotIn("dbs/appdb/colls/people", rest._partition_key_cache)

    def test_wrong_collection_type(self):
        client, _ = make_client()
        with self.assertRaises(ValidationError):
            client.collections.delete(42, "appdb")

    def test_partition_key_ranges(self):
        client, http = make_client(
            [
                (
                    200,
                    {},
                    {
                        "_rid": "coll-rid==",
                        "PartitionKeyRanges": [
                            {"id": "0", "minInclusive": "", "maxExclusive": "FF", "_rid": "r0=="},
                        ],
                        "_count": 1,
                    },
                )
            ]
        )

        page = client.collections.get_partition_key_ranges("people", "appdb")

        self.assertEqual(http.calls[0][:2], ("get", f"{BASE}/dbs/appdb/colls/people/pkranges"))
        self.assertEqual(page.resource.count, 1)
        self.assertIsInstance(page.items[0], PartitionKeyRange)
        self.assertEqual(page.items[0].max_exclusive, "FF")
