# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Database resource model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .resource import Resource

if TYPE_CHECKING:
    from ..core.results import DataResponse, ListResponse, Response
    from .collection import DocumentCollection
    from .indexing import IndexingPolicy
    from .partition import PartitionKeyDefinition


@dataclass
class Database(Resource):
    """
    A database: a named container of collections.

    :param collections_link: ``_colls`` feed link.
    :type collections_link: str | None
    :param users_link: ``_users`` feed link.
    :type users_link: str | None

    Example:
        Work with collections through a database returned by the client::

            db = client.get_database("appdb").raise_for_error().resource
            db.create_collection("people", "/testKey")
            for coll in db.get_collections().items:
                print(coll.id)
    """

    collections_link: Optional[str] = None
    users_link: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id}
        out.update(self._system_properties_to_dict())
        if self.collections_link is not None:
            out["_colls"] = self.collections_link
        if self.users_link is not None:
            out["_users"] = self.users_link
        return out

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Database":
        return cls(
            id=data.get("id", ""),
            collections_link=data.get("_colls"),
            users_link=data.get("_users"),
            **cls._system_properties(data),
        )

    # Convenience pass-throughs to the bound client

    def refresh(self) -> "Response[Database]":
        return self._bound_client().databases.get(self.id)

    def delete(self) -> "DataResponse":
        return self._bound_client().databases.delete(self.id)

    def create_collection(
        self,
        collection_id: str,
        partition_key: Union[str, "PartitionKeyDefinition"],
        *,
        throughput: Optional[int] = None,
        indexing_policy: Optional["IndexingPolicy"] = None,
    ) -> "Response[DocumentCollection]":
        return self._bound_client().collections.create(
            collection_id, partition_key, self.id, throughput=throughput, indexing_policy=indexing_policy
        )

    def get_collection(self, collection_id: str) -> "Response[DocumentCollection]":
        return self._bound_client().collections.get(collection_id, self.id)

    def get_collections(
        self, *, max_per_page: Optional[int] = None, continuation: Optional[str] = None
    ) -> "ListResponse[DocumentCollection]":
        return self._bound_client().collections.list(self.id, max_per_page=max_per_page, continuation=continuation)

    def delete_collection(self, collection: Union[str, "DocumentCollection"]) -> "DataResponse":
        return self._bound_client().collections.delete(collection, self.id)
