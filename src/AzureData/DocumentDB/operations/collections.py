# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Document collection operations namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..common.constants import (
    LIST_KEY_COLLECTIONS,
    LIST_KEY_PARTITION_KEY_RANGES,
    RESOURCE_COLLECTION,
    RESOURCE_PARTITION_KEY_RANGE,
)
from ..core._error_codes import VALIDATION_RESOURCE_TYPE
from ..core.errors import ValidationError
from ..core.results import DataResponse, ListResponse, Response
from ..data._rest import collection_link, database_link
from ..models.collection import DocumentCollection
from ..models.indexing import IndexingPolicy
from ..models.partition import PartitionKeyDefinition, PartitionKeyRange
from ..models.resource import validate_resource_id
from ._common import _data, _page, _single

if TYPE_CHECKING:
    from ..client import AzureDataClient


def _collection_id(collection: Union[str, DocumentCollection]) -> str:
    if isinstance(collection, DocumentCollection):
        return collection.id
    if isinstance(collection, str):
        return collection
    raise ValidationError("collection must be an id or a DocumentCollection.", subcode=VALIDATION_RESOURCE_TYPE)


class CollectionOperations:
    """
    Document collection operations.

    Accessed via ``client.collections``.

    Example::

        policy = IndexingPolicy(mode=IndexingMode.LAZY).include("/*").exclude("/test/*")
        coll = client.collections.create("people", "/testKey", "appdb", indexing_policy=policy)

        ranges = client.collections.get_partition_key_ranges("people", "appdb")
        print(ranges.resource.count)
    """

    def __init__(self, client: "AzureDataClient") -> None:
        self._client = client

    def _binder(self, database_id: str):
        def bind(data: Dict[str, Any]) -> DocumentCollection:
            return DocumentCollection.from_api_response(data, database_id)._bind(self._client)

        return bind

    def create(
        self,
        collection_id: str,
        partition_key: Union[str, PartitionKeyDefinition],
        database_id: str,
        *,
        throughput: Optional[int] = None,
        indexing_policy: Optional[IndexingPolicy] = None,
    ) -> Response[DocumentCollection]:
        """
        Create a collection in a database.

        :param collection_id: Id of the new collection.
        :type collection_id: str
        :param partition_key: Partition key path (e.g. ``"/testKey"``) or a full definition.
        :type partition_key: str or PartitionKeyDefinition
        :param database_id: Id of the owning database.
        :type database_id: str
        :param throughput: Provisioned throughput sent as ``x-ms-offer-throughput``. Passed
            through unvalidated; invalid values come back as a service error.
        :type throughput: int or None
        :param indexing_policy: Indexing policy; the service default applies when None.
        :type indexing_policy: IndexingPolicy or None
        :return: Envelope with the created collection, or the service error.
        :rtype: Response[DocumentCollection]
        :raises ~AzureData.DocumentDB.core.errors.ValidationError: If an id or the partition key path is invalid.
        """
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")
        definition = (
            partition_key
            if isinstance(partition_key, PartitionKeyDefinition)
            else PartitionKeyDefinition.from_path(partition_key)
        )
        body = DocumentCollection(
            id=collection_id, indexing_policy=indexing_policy, partition_key=definition
        ).to_dict()
        with self._client._scoped_rest() as rest:
            raw = rest._create(
                "collections.create",
                RESOURCE_COLLECTION,
                database_link(database_id),
                body,
                headers=rest._throughput_header(throughput),
                database=database_id,
                collection=collection_id,
            )
            if raw.error is None:
                rest._remember_partition_key(database_id, collection_id, definition)
        return _single(raw, self._binder(database_id))

    def get(self, collection_id: str, database_id: str) -> Response[DocumentCollection]:
        """Read a collection, including its indexing policy and partition key."""
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._read(
                "collections.get",
                RESOURCE_COLLECTION,
                collection_link(database_id, collection_id),
                database=database_id,
                collection=collection_id,
            )
        return _single(raw, self._binder(database_id))

    def list(
        self, database_id: str, *, max_per_page: Optional[int] = None, continuation: Optional[str] = None
    ) -> ListResponse[DocumentCollection]:
        """List the collections of a database, one page at a time."""
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._read_feed(
                "collections.list",
                RESOURCE_COLLECTION,
                database_link(database_id),
                headers=rest._paging_headers(max_per_page, continuation),
                database=database_id,
            )
        return _page(raw, LIST_KEY_COLLECTIONS, self._binder(database_id))

    def replace(
        self,
        collection: Union[str, DocumentCollection],
        database_id: str,
        indexing_policy: Optional[IndexingPolicy] = None,
    ) -> Response[DocumentCollection]:
        """
        Replace a collection's indexing policy.

        The partition key of a collection cannot change; it is sent back as read.

        :param collection: Collection id or a :class:`DocumentCollection`. When an id is
            given the current definition is read first.
        :type collection: str or DocumentCollection
        :param database_id: Id of the owning database.
        :type database_id: str
        :param indexing_policy: New policy. Defaults to the collection's current policy.
        :type indexing_policy: IndexingPolicy or None
        :return: Envelope with the updated collection as returned by the service.
        :rtype: Response[DocumentCollection]
        """
        collection_id = _collection_id(collection)
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            if not isinstance(collection, DocumentCollection):
                current = self.get(collection_id, database_id)
                if current.is_error:
                    return current
                collection = current.resource
            body = DocumentCollection(
                id=collection_id,
                indexing_policy=indexing_policy or collection.indexing_policy,
                partition_key=collection.partition_key,
            ).to_dict()
            raw = rest._replace(
                "collections.replace",
                RESOURCE_COLLECTION,
                collection_link(database_id, collection_id),
                body,
                database=database_id,
                collection=collection_id,
            )
        return _single(raw, self._binder(database_id))

    def delete(self, collection: Union[str, DocumentCollection], database_id: str) -> DataResponse:
        """Delete a collection and all of its documents."""
        collection_id = _collection_id(collection)
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._delete(
                "collections.delete",
                RESOURCE_COLLECTION,
                collection_link(database_id, collection_id),
                database=database_id,
                collection=collection_id,
            )
            if raw.error is None:
                rest._forget_partition_key(database_id, collection_id)
        return _data(raw)

    def get_partition_key_ranges(
        self, collection: Union[str, DocumentCollection], database_id: str
    ) -> ListResponse[PartitionKeyRange]:
        """List the server-assigned partition key ranges of a collection."""
        collection_id = _collection_id(collection)
        validate_resource_id(collection_id, "collection")
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._read_feed(
                "collections.partition_key_ranges",
                RESOURCE_PARTITION_KEY_RANGE,
                collection_link(database_id, collection_id),
                database=database_id,
                collection=collection_id,
            )
        return _page(raw, LIST_KEY_PARTITION_KEY_RANGES, PartitionKeyRange.from_api_response)
