# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Document operations namespace."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Tuple, Union

import pandas as pd

from ..common.constants import LIST_KEY_DOCUMENTS, RESOURCE_DOCUMENT
from ..core._error_codes import VALIDATION_RESOURCE_TYPE
from ..core.errors import ValidationError
from ..core.results import DataResponse, ListResponse, Response
from ..data._rest import _active_or_new_correlation_id, collection_link, document_link
from ..models.document import Document
from ..models.query import Query
from ..models.resource import validate_resource_id
from ..utils._pandas import dataframe_to_documents, documents_to_dataframe
from ._common import _data, _page, _single

if TYPE_CHECKING:
    from ..client import AzureDataClient

DocumentLike = Union[Document, Dict[str, Any]]


def _body(document: DocumentLike) -> Tuple[str, Dict[str, Any]]:
    """Return ``(id, body)`` for a document, assigning a new id when a dict has none."""
    if isinstance(document, Document):
        body = document.to_dict()
    elif isinstance(document, dict):
        body = dict(document)
        if not body.get("id"):
            body["id"] = str(uuid.uuid4())
    else:
        raise ValidationError("document must be a Document or a dict.", subcode=VALIDATION_RESOURCE_TYPE)
    return validate_resource_id(body["id"], "document"), body


class DocumentOperations:
    """
    Document operations with partition-key routing.

    Accessed via ``client.documents``. Every operation that addresses a single
    document accepts an explicit ``partition_key``. When it is omitted, the
    value is read from the document body using the collection's partition key
    definition (fetched once per collection and cached).

    Example::

        doc = Document("doc-1", data={"testKey": "PartitionKeyValue", "customNumber": 86})
        created = client.documents.create(doc, "people", "appdb", partition_key="PartitionKeyValue")

        page = client.documents.query(
            "SELECT * FROM c WHERE c.customNumber > @n", "people", "appdb", parameters={"n": 10}
        )
        for d in page.items:
            print(d.id, d["customNumber"])
    """

    def __init__(self, client: "AzureDataClient") -> None:
        self._client = client

    def _binder(self, collection_id: str, database_id: str):
        def bind(data: Dict[str, Any]) -> Document:
            return Document.from_api_response(data, database_id, collection_id)._bind(self._client)

        return bind

    @staticmethod
    def _validate_parents(collection_id: str, database_id: str) -> None:
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")

    def _write(
        self,
        operation: str,
        document: DocumentLike,
        collection_id: str,
        database_id: str,
        partition_key: Any,
        upsert: bool,
    ) -> Response[Document]:
        self._validate_parents(collection_id, database_id)
        _, body = _body(document)
        with self._client._scoped_rest() as rest:
            headers, failed = rest._resolve_partition_key_headers(database_id, collection_id, partition_key, body)
            if failed is not None:
                return _single(failed, self._binder(collection_id, database_id))
            raw = rest._create(
                operation,
                RESOURCE_DOCUMENT,
                collection_link(database_id, collection_id),
                body,
                headers=headers,
                upsert=upsert,
                database=database_id,
                collection=collection_id,
            )
        return _single(raw, self._binder(collection_id, database_id))

    def create(
        self, document: DocumentLike, collection_id: str, database_id: str, *, partition_key: Any = None
    ) -> Response[Document]:
        """
        Create a document.

        :param document: A :class:`Document`, or a dict (an ``id`` is generated when missing).
        :type document: Document or dict
        :param collection_id: Id of the target collection.
        :type collection_id: str
        :param database_id: Id of the owning database.
        :type database_id: str
        :param partition_key: Partition key value. Must match the value in the document;
            the service rejects mismatches.
        :type partition_key: Any
        :return: Envelope with the created document, or the service error (409 if the id exists).
        :rtype: Response[Document]
        :raises ~AzureData.DocumentDB.core.errors.ValidationError: If ids are invalid, or the partition
            key is omitted and cannot be read from the document.
        """
        return self._write("documents.create", document, collection_id, database_id, partition_key, upsert=False)

    def upsert(
        self, document: DocumentLike, collection_id: str, database_id: str, *, partition_key: Any = None
    ) -> Response[Document]:
        """Create the document, or replace it if a document with the same id exists."""
        return self._write("documents.upsert", document, collection_id, database_id, partition_key, upsert=True)

    def get(
        self,
        document: Union[str, Document],
        collection_id: str,
        database_id: str,
        *,
        partition_key: Any = None,
    ) -> Response[Document]:
        """
        Read a document.

        :param document: Document id, or a :class:`Document` whose body supplies the partition key.
        :type document: str or Document
        :param partition_key: Partition key value; required for an id on a partitioned collection.
        :type partition_key: Any
        :rtype: Response[Document]
        """
        self._validate_parents(collection_id, database_id)
        document_id, body = self._address(document)
        with self._client._scoped_rest() as rest:
            headers, failed = rest._resolve_partition_key_headers(database_id, collection_id, partition_key, body)
            if failed is not None:
                return _single(failed, self._binder(collection_id, database_id))
            raw = rest._read(
                "documents.get",
                RESOURCE_DOCUMENT,
                document_link(database_id, collection_id, document_id),
                headers=headers,
                database=database_id,
                collection=collection_id,
            )
        return _single(raw, self._binder(collection_id, database_id))

    def list(
        self,
        collection_id: str,
        database_id: str,
        *,
        max_per_page: Optional[int] = None,
        continuation: Optional[str] = None,
    ) -> ListResponse[Document]:
        """List one page of the documents in a collection, across partitions."""
        self._validate_parents(collection_id, database_id)
        with self._client._scoped_rest() as rest:
            raw = rest._read_feed(
                "documents.list",
                RESOURCE_DOCUMENT,
                collection_link(database_id, collection_id),
                headers=rest._paging_headers(max_per_page, continuation),
                database=database_id,
                collection=collection_id,
            )
        return _page(raw, LIST_KEY_DOCUMENTS, self._binder(collection_id, database_id))

    def list_pages(
        self, collection_id: str, database_id: str, *, max_per_page: Optional[int] = None
    ) -> Iterator[ListResponse[Document]]:
        """Yield every page of a collection's documents; stops after the last or the first failed page."""
        correlation_id = _active_or_new_correlation_id()
        continuation: Optional[str] = None
        while True:
            with self._client._scoped_rest(correlation_id):
                page = self.list(collection_id, database_id, max_per_page=max_per_page, continuation=continuation)
            yield page
            if page.is_error or not page.has_more_results:
                return
            continuation = page.continuation

    def replace(
        self,
        document: DocumentLike,
        collection_id: str,
        database_id: str,
        *,
        partition_key: Any = None,
        etag: Optional[str] = None,
    ) -> Response[Document]:
        """
        Replace an existing document.

        :param etag: When set, sent as ``If-Match``; the service answers 412 if the
            document changed since that etag.
        :type etag: str or None
        :rtype: Response[Document]
        """
        self._validate_parents(collection_id, database_id)
        document_id, body = _body(document)
        with self._client._scoped_rest() as rest:
            headers, failed = rest._resolve_partition_key_headers(database_id, collection_id, partition_key, body)
            if failed is not None:
                return _single(failed, self._binder(collection_id, database_id))
            raw = rest._replace(
                "documents.replace",
                RESOURCE_DOCUMENT,
                document_link(database_id, collection_id, document_id),
                body,
                headers=headers,
                etag=etag,
                database=database_id,
                collection=collection_id,
            )
        return _single(raw, self._binder(collection_id, database_id))

    def delete(
        self,
        document: Union[str, Document],
        collection_id: str,
        database_id: str,
        *,
        partition_key: Any = None,
    ) -> DataResponse:
        """Delete a document by id or instance."""
        self._validate_parents(collection_id, database_id)
        document_id, body = self._address(document)
        with self._client._scoped_rest() as rest:
            headers, failed = rest._resolve_partition_key_headers(database_id, collection_id, partition_key, body)
            if failed is not None:
                return _data(failed)
            raw = rest._delete(
                "documents.delete",
                RESOURCE_DOCUMENT,
                document_link(database_id, collection_id, document_id),
                headers=headers,
                database=database_id,
                collection=collection_id,
            )
        return _data(raw)

    @staticmethod
    def _address(document: Union[str, Document]) -> Tuple[str, Optional[Dict[str, Any]]]:
        if isinstance(document, Document):
            return validate_resource_id(document.id, "document"), document.to_dict()
        if isinstance(document, str):
            return validate_resource_id(document, "document"), None
        raise ValidationError("document must be an id or a Document.", subcode=VALIDATION_RESOURCE_TYPE)

    # ----------------------------- Queries --------------------------------

    def query(
        self,
        query: Union[str, Query],
        collection_id: str,
        database_id: str,
        *,
        parameters: Optional[Dict[str, Any]] = None,
        partition_key: Any = None,
        max_per_page: Optional[int] = None,
        continuation: Optional[str] = None,
    ) -> ListResponse[Document]:
        """
        Run a SQL query and return one page of results.

        Without ``partition_key`` the query fans out across partitions.

        :param query: SQL text or a :class:`~AzureData.DocumentDB.models.query.Query`.
        :type query: str or Query
        :param parameters: Named parameter values, merged into the query's own.
        :type parameters: dict or None
        :param partition_key: Restrict the query to one partition.
        :type partition_key: Any
        :param max_per_page: Page size hint (``x-ms-max-item-count``).
        :type max_per_page: int or None
        :param continuation: Continuation token from a previous page.
        :type continuation: str or None
        :return: One page; ``has_more_results`` tells whether to ask for the next.
        :rtype: ListResponse[Document]
        """
        self._validate_parents(collection_id, database_id)
        q = Query.of(query, parameters)
        with self._client._scoped_rest() as rest:
            headers = rest._paging_headers(max_per_page, continuation)
            if partition_key is not None:
                headers.update(rest._partition_key_header(partition_key))
            else:
                headers.update(rest._cross_partition_header())
            raw = rest._query(
                "documents.query",
                RESOURCE_DOCUMENT,
                collection_link(database_id, collection_id),
                q.to_dict(),
                headers=headers,
                database=database_id,
                collection=collection_id,
            )
        return _page(raw, LIST_KEY_DOCUMENTS, self._binder(collection_id, database_id))

    def query_pages(
        self,
        query: Union[str, Query],
        collection_id: str,
        database_id: str,
        *,
        parameters: Optional[Dict[str, Any]] = None,
        partition_key: Any = None,
        max_per_page: Optional[int] = None,
    ) -> Iterator[ListResponse[Document]]:
        """
        Yield every page of a query, following continuation tokens.

        Iteration stops after the last page, or after the first failed page
        (which is yielded so the caller can inspect its error).

        Example::

            for page in client.documents.query_pages("SELECT * FROM c", "people", "appdb"):
                page.raise_for_error()
                for doc in page.items:
                    print(doc.id)
        """
        correlation_id = _active_or_new_correlation_id()
        continuation: Optional[str] = None
        while True:
            with self._client._scoped_rest(correlation_id):
                page = self.query(
                    query,
                    collection_id,
                    database_id,
                    parameters=parameters,
                    partition_key=partition_key,
                    max_per_page=max_per_page,
                    continuation=continuation,
                )
            yield page
            if page.is_error or not page.has_more_results:
                return
            continuation = page.continuation

    def query_dataframe(
        self,
        query: Union[str, Query],
        collection_id: str,
        database_id: str,
        *,
        parameters: Optional[Dict[str, Any]] = None,
        partition_key: Any = None,
    ) -> pd.DataFrame:
        """
        Run a query across all pages and return the documents as a DataFrame.

        System properties are dropped; the ``id`` column comes first.

        :raises ~AzureData.DocumentDB.core.errors.HttpError: If any page fails.
        """
        documents = []
        for page in self.query_pages(
            query, collection_id, database_id, parameters=parameters, partition_key=partition_key
        ):
            page.raise_for_error()
            documents.extend(page.items)
        return documents_to_dataframe(documents)

    def create_from_dataframe(
        self, df: pd.DataFrame, collection_id: str, database_id: str, *, na_as_null: bool = False
    ) -> list:
        """
        Create one document per DataFrame row.

        Rows are sent one request at a time; a failed row does not stop the others.
        A row rejected before sending (for example one without a partition key
        value) gets an error :class:`Response` carrying the ``ValidationError``.

        :param na_as_null: Send missing values as null instead of omitting the property.
        :return: One :class:`Response` per row, in row order.
        :rtype: list[Response[Document]]
        """
        self._validate_parents(collection_id, database_id)
        results = []
        with self._client._scoped_rest():
            for body in dataframe_to_documents(df, na_as_null=na_as_null):
                try:
                    results.append(self.create(body, collection_id, database_id))
                except ValidationError as exc:
                    results.append(Response(error=exc))
        return results
