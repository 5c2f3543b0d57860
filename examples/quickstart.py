#!/usr/bin/env python3
# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
AzureData DocumentDB - Quickstart

Walks through a database, a partitioned collection and a few documents:
create, read, upsert, query (single page, all pages and as a DataFrame),
then cleans everything up.

Prerequisites:
- ``pip install -e .`` from the repository root
- An account name in ``AZURE_DATA_ACCOUNT_NAME``
- Either a master key in ``AZURE_DATA_MASTER_KEY``, or an Azure AD identity
  with data-plane access (picked up by ``DefaultAzureCredential``)

Usage:
    python examples/quickstart.py
"""

import logging
import os
import sys
import uuid

import pandas as pd
from azure.identity import DefaultAzureCredential

from AzureData.DocumentDB.client import AzureDataClient
from AzureData.DocumentDB.core._auth import MasterKeyCredential
from AzureData.DocumentDB.core.errors import HttpError
from AzureData.DocumentDB.models.indexing import DataType, Index, IndexingPolicy


def build_client() -> AzureDataClient:
    account = os.environ.get("AZURE_DATA_ACCOUNT_NAME", "").strip()
    if not account:
        print("Set AZURE_DATA_ACCOUNT_NAME to your Cosmos DB account name.")
        sys.exit(1)
    master_key = os.environ.get("AZURE_DATA_MASTER_KEY")
    credential = MasterKeyCredential(master_key) if master_key else DefaultAzureCredential()
    return AzureDataClient(account, credential)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    database_id = f"quickstart-{uuid.uuid4().hex[:8]}"
    collection_id = "people"

    with build_client() as client:
        print(f"Account endpoint: {client.endpoint}")

        db = client.create_database(database_id).raise_for_error().resource
        print(f"Created database {db.id} ({db.resource_id})")

        try:
            policy = IndexingPolicy().include("/*", Index.range(DataType.NUMBER, -1)).exclude("/notes/*")
            coll = db.create_collection(collection_id, "/testKey", indexing_policy=policy).raise_for_error().resource
            print(f"Created collection {coll.id}, partitioned on {coll.partition_key.paths}")

            for n in range(5):
                created = coll.create_document(
                    {"id": f"doc-{n}", "testKey": "PartitionKeyValue", "customNumber": n * 10}
                )
                print(f"Created {created.resource.id}: {created.request_charge} RU")

            # Partition key is read from the body.
            upserted = coll.create_or_update_document(
                {"id": "doc-0", "testKey": "PartitionKeyValue", "customNumber": 86}
            ).raise_for_error()
            print(f"Upserted doc-0, etag {upserted.resource.etag}")

            page = coll.query_documents(
                "SELECT * FROM c WHERE c.customNumber > @n",
                parameters={"n": 15},
                partition_key="PartitionKeyValue",
            ).raise_for_error()
            print(f"Query matched {[d.id for d in page.items]}")

            total = 0
            for page in client.documents.query_pages("SELECT * FROM c", collection_id, database_id, max_per_page=2):
                page.raise_for_error()
                total += page.resource.count
            print(f"Paged through {total} documents")

            df = client.documents.query_dataframe("SELECT * FROM c", collection_id, database_id)
            print(df.sort_values("customNumber").to_string(index=False))

            extra = pd.DataFrame({"testKey": ["PartitionKeyValue"] * 2, "customNumber": [1, 2]})
            results = client.documents.create_from_dataframe(extra, collection_id, database_id)
            print(f"Created {sum(r.is_successful for r in results)} documents from a DataFrame")

            missing = coll.get_document("does-not-exist", partition_key="PartitionKeyValue")
            print(f"Reading a missing document returned status {missing.status_code}")
            try:
                missing.raise_for_error()
            except HttpError as ex:
                print(f"raise_for_error(): {ex}")
        finally:
            client.delete_database(database_id)
            print(f"Deleted database {database_id}")


if __name__ == "__main__":
    main()
