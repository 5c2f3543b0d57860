# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Union
from urllib.parse import urlparse

import requests

from .core._auth import Credential, _AuthManager
from .core.config import AzureDataConfig
from .core.results import DataResponse, ListResponse, Response
from .data._rest import _RestClient
from .models.collection import DocumentCollection
from .models.database import Database
from .models.document import Document
from .models.indexing import IndexingPolicy
from .models.partition import PartitionKeyDefinition, PartitionKeyRange
from .models.query import Query
from .operations.collections import CollectionOperations
from .operations.databases import DatabaseOperations
from .operations.documents import DocumentOperations

_ACCOUNT_HOST_SUFFIX = ".documents.azure.com"
_ACCOUNT_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*$")


def _account_endpoint(account: str) -> str:
    """
    Normalize an account name, host or endpoint URL to ``https://{host}``.

    Only a bare account name (letters, digits and hyphens) gets the
    ``.documents.azure.com`` suffix; ``localhost:8081`` and other hosts are kept as given.
    """
    account = (account or "").strip().rstrip("/")
    if not account:
        raise ValueError("account is required.")
    if "://" in account:
        parsed = urlparse(account)
        if not parsed.netloc:
            raise ValueError(f"Invalid account endpoint {account!r}.")
        return f"{parsed.scheme}://{parsed.netloc}"
    if _ACCOUNT_NAME.match(account):
        return f"https://{account}{_ACCOUNT_HOST_SUFFIX}"
    if " " in account or "/" in account:
        raise ValueError(f"Invalid account {account!r}.")
    return f"https://{account}"


class AzureDataClient:
    """
    High-level client for a Cosmos DB (SQL API) account.

    The client signs every request with the supplied credential and delegates
    HTTP work to an internal :class:`~AzureData.DocumentDB.data._rest._RestClient`.
    Operations never raise on service errors: each returns an envelope
    (:class:`~AzureData.DocumentDB.core.results.Response`,
    :class:`~AzureData.DocumentDB.core.results.ListResponse` or
    :class:`~AzureData.DocumentDB.core.results.DataResponse`) whose ``error``
    holds the :class:`~AzureData.DocumentDB.core.errors.HttpError`. Call
    ``raise_for_error()`` on the envelope to turn it into an exception.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager pools connections through one
        :class:`requests.Session`::

            with AzureDataClient("myaccount", MasterKeyCredential(key)) as client:
                client.databases.create("appdb")
            # Resources automatically cleaned up

    The client provides two API styles:

    **Namespace API**:
        - ``client.databases``: create, get, list, delete
        - ``client.collections``: create, get, list, replace, delete, partition key ranges
        - ``client.documents``: create, upsert, get, list, replace, delete, query

    **Flat API**:
        ``create_database()``, ``create_collection()``, ``query_documents()`` and
        friends take the resource first and its parents after, and delegate to the
        namespaces.

    :param account: Account name (``"myaccount"``), host (``"myaccount.documents.azure.com"``)
        or endpoint URL (``"https://myaccount.documents.azure.com:443/"``).
    :type account: :class:`str`
    :param credential: :class:`~AzureData.DocumentDB.core._auth.MasterKeyCredential`,
        :class:`~AzureData.DocumentDB.core._auth.ResourceTokenCredential`, or any
        :class:`azure.core.credentials.TokenCredential` for Azure AD.
    :param config: Optional configuration for consistency, timeouts, retries and telemetry.
        If not provided, defaults are loaded from :meth:`~AzureData.DocumentDB.core.config.AzureDataConfig.from_env`.
    :type config: ~AzureData.DocumentDB.core.config.AzureDataConfig or None

    :raises ValueError: If ``account`` is missing or not a valid endpoint.
    :raises ~AzureData.DocumentDB.core.errors.ValidationError: If the credential is unusable.

    Example::

        import os
        from AzureData.DocumentDB.client import AzureDataClient
        from AzureData.DocumentDB.core._auth import MasterKeyCredential

        with AzureDataClient("myaccount", MasterKeyCredential(os.environ["MASTER_KEY"])) as client:
            db = client.create_database("appdb").raise_for_error().resource
            coll = db.create_collection("people", "/testKey").raise_for_error().resource
            coll.create_document({"id": "doc-1", "testKey": "PartitionKeyValue"})
            for doc in coll.query_documents("SELECT * FROM c").items:
                print(doc.id)
    """

    def __init__(
        self,
        account: str,
        credential: Credential,
        config: Optional[AzureDataConfig] = None,
    ) -> None:
        self._base_url = _account_endpoint(account)
        self.auth = _AuthManager(credential, scope=f"{self._base_url}/.default")
        self._config = config or AzureDataConfig.from_env()
        self._rest: Optional[_RestClient] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

        self.databases = DatabaseOperations(self)
        self.collections = CollectionOperations(self)
        self.documents = DocumentOperations(self)

    @property
    def endpoint(self) -> str:
        return self._base_url

    def __enter__(self) -> "AzureDataClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context reuse this session.
        """
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
            if self._rest is not None:
                # Rebuild so the REST client picks up the session.
                self._rest.close()
                self._rest = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the client and release resources.

        Closes the HTTP session (if owned) and the internal REST client. Safe to
        call multiple times.
        """
        if self._rest is not None:
            self._rest.close()
            self._rest = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_rest(self) -> _RestClient:
        """Get or lazily create the internal REST client."""
        if self._rest is None:
            self._rest = _RestClient(self.auth, self._base_url, self._config, session=self._session)
        return self._rest

    @contextmanager
    def _scoped_rest(self, correlation_id: Optional[str] = None) -> Iterator[_RestClient]:
        """Yield the low-level client while ensuring a correlation scope is active."""
        rest = self._get_rest()
        with rest._call_scope(correlation_id):
            yield rest

    # ----------------------------- Databases ------------------------------

    def create_database(self, database_id: str, throughput: Optional[int] = None) -> Response[Database]:
        return self.databases.create(database_id, throughput=throughput)

    def get_database(self, database_id: str) -> Response[Database]:
        return self.databases.get(database_id)

    def get_databases(
        self, max_per_page: Optional[int] = None, continuation: Optional[str] = None
    ) -> ListResponse[Database]:
        return self.databases.list(max_per_page=max_per_page, continuation=continuation)

    def delete_database(self, database: Union[str, Database]) -> DataResponse:
        return self.databases.delete(database)

    # ----------------------------- Collections ----------------------------

    def create_collection(
        self,
        collection_id: str,
        partition_key: Union[str, PartitionKeyDefinition],
        database_id: str,
        throughput: Optional[int] = None,
        indexing_policy: Optional[IndexingPolicy] = None,
    ) -> Response[DocumentCollection]:
        return self.collections.create(
            collection_id, partition_key, database_id, throughput=throughput, indexing_policy=indexing_policy
        )

    def get_collection(self, collection_id: str, database_id: str) -> Response[DocumentCollection]:
        return self.collections.get(collection_id, database_id)

    def get_collections(
        self, database_id: str, max_per_page: Optional[int] = None, continuation: Optional[str] = None
    ) -> ListResponse[DocumentCollection]:
        return self.collections.list(database_id, max_per_page=max_per_page, continuation=continuation)

    def replace_collection(
        self,
        collection: Union[str, DocumentCollection],
        database_id: str,
        indexing_policy: Optional[IndexingPolicy] = None,
    ) -> Response[DocumentCollection]:
        return self.collections.replace(collection, database_id, indexing_policy)

    def delete_collection(self, collection: Union[str, DocumentCollection], database_id: str) -> DataResponse:
        return self.collections.delete(collection, database_id)

    def get_collection_partition_key_ranges(
        self, collection: Union[str, DocumentCollection], database_id: str
    ) -> ListResponse[PartitionKeyRange]:
        return self.collections.get_partition_key_ranges(collection, database_id)

    # ----------------------------- Documents ------------------------------

    def create_document(
        self,
        document: Union[Document, Dict[str, Any]],
        collection_id: str,
        database_id: str,
        partition_key: Any = None,
    ) -> Response[Document]:
        return self.documents.create(document, collection_id, database_id, partition_key=partition_key)

    def create_or_update_document(
        self,
        document: Union[Document, Dict[str, Any]],
        collection_id: str,
        database_id: str,
        partition_key: Any = None,
    ) -> Response[Document]:
        return self.documents.upsert(document, collection_id, database_id, partition_key=partition_key)

    def get_document(
        self, document_id: str, collection_id: str, database_id: str, partition_key: Any = None
    ) -> Response[Document]:
        return self.documents.get(document_id, collection_id, database_id, partition_key=partition_key)

    def get_documents(
        self,
        collection_id: str,
        database_id: str,
        max_per_page: Optional[int] = None,
        continuation: Optional[str] = None,
    ) -> ListResponse[Document]:
        return self.documents.list(
            collection_id, database_id, max_per_page=max_per_page, continuation=continuation
        )

    def replace_document(
        self,
        document: Union[Document, Dict[str, Any]],
        collection_id: str,
        database_id: str,
        partition_key: Any = None,
    ) -> Response[Document]:
        return self.documents.replace(document, collection_id, database_id, partition_key=partition_key)

    def delete_document(
        self,
        document: Union[str, Document],
        collection_id: str,
        database_id: str,
        partition_key: Any = None,
    ) -> DataResponse:
        return self.documents.delete(document, collection_id, database_id, partition_key=partition_key)

    def query_documents(
        self,
        collection_id: str,
        database_id: str,
        query: Union[str, Query],
        parameters: Optional[Dict[str, Any]] = None,
        partition_key: Any = None,
        max_per_page: Optional[int] = None,
        continuation: Optional[str] = None,
    ) -> ListResponse[Document]:
        """
        Query the documents of a collection; see :meth:`DocumentOperations.query`.

        Arguments follow the collection-first order of the other flat methods.
        """
        return self.documents.query(
            query,
            collection_id,
            database_id,
            parameters=parameters,
            partition_key=partition_key,
            max_per_page=max_per_page,
            continuation=continuation,
        )


__all__ = ["AzureDataClient"]
