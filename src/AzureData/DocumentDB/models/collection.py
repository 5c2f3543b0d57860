# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Document collection resource model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from ..core.errors import ValidationError
from .indexing import IndexingPolicy
from .partition import PartitionKeyDefinition
from .resource import Resource

if TYPE_CHECKING:
    from ..core.results import DataResponse, ListResponse, Response
    from .document import Document
    from .partition import PartitionKeyRange
    from .query import Query


@dataclass
class DocumentCollection(Resource):
    """
    A collection of documents with its indexing policy and partition key.

    :param indexing_policy: Indexing policy; None lets the service apply its default.
    :type indexing_policy: IndexingPolicy | None
    :param partition_key: Partition key definition; None for legacy non-partitioned collections.
    :type partition_key: PartitionKeyDefinition | None
    :param database_id: Id of the owning database. Set on collections returned by the client.
    :type database_id: str | None
    """

    indexing_policy: Optional[IndexingPolicy] = None
    partition_key: Optional[PartitionKeyDefinition] = None
    documents_link: Optional[str] = None
    stored_procedures_link: Optional[str] = None
    triggers_link: Optional[str] = None
    user_defined_functions_link: Optional[str] = None
    conflicts_link: Optional[str] = None
    database_id: Optional[str] = field(default=None, compare=False)

    _LINK_KEYS = {
        "documents_link": "_docs",
        "stored_procedures_link": "_sprocs",
        "triggers_link": "_triggers",
        "user_defined_functions_link": "_udfs",
        "conflicts_link": "_conflicts",
    }

    def to_dict(self) -> Dict[str, Any]:
        """Body sent on create/replace, plus any system properties."""
        out: Dict[str, Any] = {"id": self.id}
        if self.indexing_policy is not None:
            out["indexingPolicy"] = self.indexing_policy.to_dict()
        if self.partition_key is not None:
            out["partitionKey"] = self.partition_key.to_dict()
        out.update(self._system_properties_to_dict())
        for attr, key in self._LINK_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_api_response(cls, data: Mapping[str, Any], database_id: Optional[str] = None) -> "DocumentCollection":
        policy = data.get("indexingPolicy")
        pk = data.get("partitionKey")
        return cls(
            id=data.get("id", ""),
            indexing_policy=IndexingPolicy.from_api_response(policy) if isinstance(policy, dict) else None,
            partition_key=PartitionKeyDefinition.from_api_response(pk) if pk and pk.get("paths") else None,
            database_id=database_id,
            **{attr: data.get(key) for attr, key in cls._LINK_KEYS.items()},
            **cls._system_properties(data),
        )

    # Convenience pass-throughs to the bound client

    def _database_id(self) -> str:
        if not self.database_id:
            raise ValidationError(f"Collection {self.id!r} does not know its database id.")
        return self.database_id

    def refresh(self) -> "Response[DocumentCollection]":
        return self._bound_client().collections.get(self.id, self._database_id())

    def delete(self) -> "DataResponse":
        return self._bound_client().collections.delete(self, self._database_id())

    def replace(self, indexing_policy: Optional[IndexingPolicy] = None) -> "Response[DocumentCollection]":
        return self._bound_client().collections.replace(self, self._database_id(), indexing_policy)

    def get_partition_key_ranges(self) -> "ListResponse[PartitionKeyRange]":
        return self._bound_client().collections.get_partition_key_ranges(self, self._database_id())

    def create_document(
        self, document: Union["Document", Dict[str, Any]], *, partition_key: Any = None
    ) -> "Response[Document]":
        return self._bound_client().documents.create(
            document, self.id, self._database_id(), partition_key=partition_key
        )

    def create_or_update_document(
        self, document: Union["Document", Dict[str, Any]], *, partition_key: Any = None
    ) -> "Response[Document]":
        return self._bound_client().documents.upsert(
            document, self.id, self._database_id(), partition_key=partition_key
        )

    def get_document(self, document_id: str, *, partition_key: Any = None) -> "Response[Document]":
        return self._bound_client().documents.get(
            document_id, self.id, self._database_id(), partition_key=partition_key
        )

    def get_documents(
        self, *, max_per_page: Optional[int] = None, continuation: Optional[str] = None
    ) -> "ListResponse[Document]":
        return self._bound_client().documents.list(
            self.id, self._database_id(), max_per_page=max_per_page, continuation=continuation
        )

    def query_documents(
        self,
        query: Union[str, "Query"],
        *,
        parameters: Optional[Dict[str, Any]] = None,
        partition_key: Any = None,
        max_per_page: Optional[int] = None,
        continuation: Optional[str] = None,
    ) -> "ListResponse[Document]":
        return self._bound_client().documents.query(
            query,
            self.id,
            self._database_id(),
            parameters=parameters,
            partition_key=partition_key,
            max_per_page=max_per_page,
            continuation=continuation,
        )
