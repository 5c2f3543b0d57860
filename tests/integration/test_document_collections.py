# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Live collection tests: create, read, list, replace and delete."""

import unittest

import pytest

from AzureData.DocumentDB.common.constants import MAX_THROUGHPUT, MIN_THROUGHPUT
from AzureData.DocumentDB.core.errors import HttpError
from AzureData.DocumentDB.models.indexing import (
    DataType,
    ExcludedPath,
    Index,
    IndexingMode,
    IndexingPolicy,
    IndexKind,
    compare_indexing_policies,
)
from tests.integration.live_helpers import PARTITION_KEY_PATH, live_client, requires_account, unique_id

pytestmark = [pytest.mark.integration, requires_account]


class TestDocumentCollections(unittest.TestCase):
    """Each test gets its own database; the collection id is fresh per test."""

    def setUp(self):
        self.client = live_client().__enter__()
        self.database_id = unique_id("DocumentCollectionTests")
        self.collection_id = unique_id("coll")
        self.database = self.client.create_database(self.database_id).raise_for_error().resource

    def tearDown(self):
        self.client.delete_database(self.database_id)
        self.client.close()

    def ensure_collection(self, throughput=None):
        response = self.client.create_collection(
            self.collection_id, PARTITION_KEY_PATH, self.database_id, throughput=throughput
        )
        response.raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)
        return response.resource

    def test_create_collection(self):
        coll = self.ensure_collection()
        self.assertEqual(coll.partition_key.paths, [PARTITION_KEY_PATH])
        self.assertIsNotNone(coll.resource_id)

    def test_create_collection_with_min_throughput(self):
        self.ensure_collection(MIN_THROUGHPUT)

    def test_create_collection_with_max_throughput(self):
        self.ensure_collection(MAX_THROUGHPUT)

    def test_create_collection_with_invalid_throughput_is_error(self):
        response = self.client.create_collection(
            self.collection_id, PARTITION_KEY_PATH, self.database_id, throughput=750
        )
        self.assertTrue(response.is_error)
        self.assertIsInstance(response.error, HttpError)
        self.assertIsNone(response.resource)
        with self.assertRaises(HttpError):
            response.raise_for_error()

    def test_create_collection_from_database(self):
        response = self.database.create_collection(self.collection_id, PARTITION_KEY_PATH)
        response.raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)

    def test_create_collection_from_database_with_throughput(self):
        response = self.database.create_collection(self.collection_id, PARTITION_KEY_PATH, throughput=MIN_THROUGHPUT)
        response.raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)

    def test_create_collection_with_indexing_policy(self):
        policy = (
            IndexingPolicy(automatic=True, mode=IndexingMode.LAZY)
            .include(
                "/*",
                Index.range(DataType.NUMBER, -1),
                Index(kind=IndexKind.HASH, data_type=DataType.STRING, precision=3),
                Index.spatial(DataType.POINT),
            )
            .exclude("/test/*")
        )
        response = self.client.create_collection(
            self.collection_id, PARTITION_KEY_PATH, self.database_id, indexing_policy=policy
        )
        response.raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)

    def test_list_collections(self):
        self.ensure_collection()
        response = self.client.get_collections(self.database_id).raise_for_error()
        self.assertGreater(response.resource.count, 0)
        self.assertIn(self.collection_id, [c.id for c in response.items])

    def test_list_collections_from_database(self):
        self.ensure_collection()
        response = self.database.get_collections().raise_for_error()
        self.assertGreater(response.resource.count, 0)

    def test_get_collection(self):
        self.ensure_collection()
        response = self.client.get_collection(self.collection_id, self.database_id).raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)
        self.assertIsNotNone(response.resource.indexing_policy)

    def test_get_collection_from_database(self):
        self.ensure_collection()
        response = self.database.get_collection(self.collection_id).raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)

    def test_get_missing_collection_is_not_found(self):
        response = self.client.get_collection(unique_id("missing"), self.database_id)
        self.assertTrue(response.is_error)
        self.assertEqual(response.status_code, 404)

    def test_refresh_collection(self):
        coll = self.ensure_collection()
        response = coll.refresh().raise_for_error()
        self.assertEqual(response.resource.id, self.collection_id)

    def test_delete_collection(self):
        coll = self.ensure_collection()
        coll.delete().raise_for_error()

    def test_delete_collection_by_ids(self):
        self.ensure_collection()
        self.client.delete_collection(self.collection_id, self.database_id).raise_for_error()

    def test_delete_collection_from_database(self):
        coll = self.ensure_collection()
        self.database.delete_collection(coll).raise_for_error()

    def test_delete_collection_from_database_by_id(self):
        self.ensure_collection()
        self.database.delete_collection(self.collection_id).raise_for_error()
        response = self.client.get_collection(self.collection_id, self.database_id)
        self.assertEqual(response.status_code, 404)

    def test_replace_collection(self):
        coll = self.ensure_collection()
        policy = coll.indexing_policy
        policy.excluded_paths.append(ExcludedPath("/customString/*"))

        response = self.client.replace_collection(coll, self.database_id, policy).raise_for_error()

        self.assertEqual(response.resource.id, self.collection_id)
        self.assertEqual(compare_indexing_policies(policy, response.resource.indexing_policy), [])

    def test_get_collection_partition_key_ranges(self):
        self.ensure_collection()
        response = self.client.get_collection_partition_key_ranges(self.collection_id, self.database_id)
        response.raise_for_error()
        self.assertGreater(response.resource.count, 0)
