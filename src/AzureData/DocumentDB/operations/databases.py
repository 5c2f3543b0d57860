# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Database operations namespace."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from ..common.constants import LIST_KEY_DATABASES, RESOURCE_DATABASE
from ..core.results import DataResponse, ListResponse, Response
from ..data._rest import database_link
from ..models.database import Database
from ..models.resource import validate_resource_id
from ._common import _data, _page, _single

if TYPE_CHECKING:
    from ..client import AzureDataClient


class DatabaseOperations:
    """
    Database operations.

    Accessed via ``client.databases``.

    Example::

        response = client.databases.create("appdb", throughput=400)
        for db in client.databases.list().items:
            print(db.id)
        client.databases.delete("appdb")
    """

    def __init__(self, client: "AzureDataClient") -> None:
        self._client = client

    def _bind(self, data) -> Database:
        return Database.from_api_response(data)._bind(self._client)

    def create(self, database_id: str, *, throughput: Optional[int] = None) -> Response[Database]:
        """
        Create a database.

        :param database_id: Id of the new database.
        :type database_id: str
        :param throughput: Provisioned throughput shared by the database's collections, sent
            as ``x-ms-offer-throughput``. Passed through unvalidated; the service rejects
            values that are not multiples of 100 or outside its limits.
        :type throughput: int or None
        :return: Envelope with the created database, or the service error.
        :rtype: Response[Database]
        :raises ~AzureData.DocumentDB.core.errors.ValidationError: If ``database_id`` is not a valid id.
        """
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._create(
                "databases.create",
                RESOURCE_DATABASE,
                "",
                {"id": database_id},
                headers=rest._throughput_header(throughput),
                database=database_id,
            )
        return _single(raw, self._bind)

    def get(self, database_id: str) -> Response[Database]:
        """Read a database by id."""
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._read("databases.get", RESOURCE_DATABASE, database_link(database_id), database=database_id)
        return _single(raw, self._bind)

    def list(self, *, max_per_page: Optional[int] = None, continuation: Optional[str] = None) -> ListResponse[Database]:
        """List the databases of the account, one page at a time."""
        with self._client._scoped_rest() as rest:
            raw = rest._read_feed(
                "databases.list", RESOURCE_DATABASE, "", headers=rest._paging_headers(max_per_page, continuation)
            )
        return _page(raw, LIST_KEY_DATABASES, self._bind)

    def delete(self, database: Union[str, Database]) -> DataResponse:
        """
        Delete a database and everything in it.

        :param database: Database id or a :class:`Database`.
        :type database: str or Database
        :rtype: DataResponse
        """
        database_id = database.id if isinstance(database, Database) else database
        validate_resource_id(database_id, "database")
        with self._client._scoped_rest() as rest:
            raw = rest._delete(
                "databases.delete", RESOURCE_DATABASE, database_link(database_id), database=database_id
            )
            if raw.error is None:
                rest._forget_partition_key(database_id)
        return _data(raw)
