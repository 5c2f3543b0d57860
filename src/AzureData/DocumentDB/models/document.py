# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Document resource model.

Provides a document representation with dict-like access to user properties
and structured access to system properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, KeysView, Mapping, Optional

from ..core.errors import ValidationError
from .resource import Resource

if TYPE_CHECKING:
    from ..core.results import DataResponse, Response


@dataclass
class Document(Resource):
    """
    A JSON document stored in a collection.

    :param id: Document id.
    :type id: str
    :param data: User properties (everything except ``id`` and system properties).
    :type data: dict[str, Any]
    :param database_id: Id of the owning database. Set on documents returned by the client.
    :type database_id: str | None
    :param collection_id: Id of the owning collection. Set on documents returned by the client.
    :type collection_id: str | None

    Example:
        Dict-like access::

            doc = Document("doc-1", data={"customString": "abc", "testKey": "PartitionKeyValue"})
            doc["customNumber"] = 86
            if "customString" in doc:
                print(doc["customString"])

        Structured access::

            created = client.documents.create(doc, "people", "appdb").raise_for_error().resource
            print(created.etag, created.timestamp)
    """

    data: Dict[str, Any] = field(default_factory=dict)
    attachments_link: Optional[str] = None
    database_id: Optional[str] = field(default=None, compare=False)
    collection_id: Optional[str] = field(default=None, compare=False)

    # Dict-like access to user properties

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def keys(self) -> KeysView[str]:
        return self.data.keys()

    def to_dict(self, include_system_properties: bool = False) -> Dict[str, Any]:
        """
        Document body as sent to the service.

        :param include_system_properties: Also include ``_rid``, ``_self``, ``_etag``, ``_ts`` and ``_attachments``.
        :type include_system_properties: bool
        """
        out: Dict[str, Any] = dict(self.data)
        out["id"] = self.id
        if include_system_properties:
            out.update(self._system_properties_to_dict())
            if self.attachments_link is not None:
                out["_attachments"] = self.attachments_link
        return out

    @classmethod
    def from_api_response(
        cls,
        data: Mapping[str, Any],
        database_id: Optional[str] = None,
        collection_id: Optional[str] = None,
    ) -> "Document":
        user = {k: v for k, v in data.items() if k != "id" and k not in cls.SYSTEM_KEYS and k != "_attachments"}
        return cls(
            id=data.get("id", ""),
            data=user,
            attachments_link=data.get("_attachments"),
            database_id=database_id,
            collection_id=collection_id,
            **cls._system_properties(data),
        )

    # Convenience pass-throughs to the bound client

    def _parents(self):
        if not self.database_id or not self.collection_id:
            raise ValidationError(f"Document {self.id!r} does not know its collection and database ids.")
        return self.collection_id, self.database_id

    def refresh(self, *, partition_key: Any = None) -> "Response[Document]":
        collection_id, database_id = self._parents()
        if partition_key is None:
            return self._bound_client().documents.get(self, collection_id, database_id)
        return self._bound_client().documents.get(self.id, collection_id, database_id, partition_key=partition_key)

    def replace(self, *, partition_key: Any = None) -> "Response[Document]":
        collection_id, database_id = self._parents()
        return self._bound_client().documents.replace(self, collection_id, database_id, partition_key=partition_key)

    def delete(self, *, partition_key: Any = None) -> "DataResponse":
        collection_id, database_id = self._parents()
        return self._bound_client().documents.delete(self, collection_id, database_id, partition_key=partition_key)
