# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Base class for server-managed resources.

Every resource carries a user-assigned ``id`` plus the system properties the
service stamps on it (``_rid``, ``_self``, ``_etag``, ``_ts``). Resources
returned by :class:`~AzureData.DocumentDB.client.AzureDataClient` are bound to
that client so their convenience methods (``refresh()``, ``delete()``, ...) can
issue requests directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional, Tuple

from ..core._error_codes import (
    VALIDATION_ID_EMPTY,
    VALIDATION_ID_INVALID_CHARACTER,
    VALIDATION_ID_TOO_LONG,
)
from ..core.errors import ValidationError

if TYPE_CHECKING:
    from ..client import AzureDataClient

_INVALID_ID_CHARACTERS = ("/", "\\", "?", "#")
_MAX_ID_LENGTH = 255


def validate_resource_id(resource_id: Any, kind: str = "resource") -> str:
    """
    Check that ``resource_id`` is usable as a resource id and in a resource link.

    :raises ~AzureData.DocumentDB.core.errors.ValidationError: If the id is empty, too long,
        ends with a space, or contains ``/``, ``\\``, ``?`` or ``#``.
    """
    if not isinstance(resource_id, str) or not resource_id.strip():
        raise ValidationError(f"{kind} id must be a non-empty string.", subcode=VALIDATION_ID_EMPTY)
    if len(resource_id) > _MAX_ID_LENGTH:
        raise ValidationError(
            f"{kind} id must be at most {_MAX_ID_LENGTH} characters.", subcode=VALIDATION_ID_TOO_LONG
        )
    if resource_id.endswith(" ") or any(c in resource_id for c in _INVALID_ID_CHARACTERS):
        raise ValidationError(
            f"{kind} id {resource_id!r} contains an invalid character.",
            subcode=VALIDATION_ID_INVALID_CHARACTER,
            details={"id": resource_id},
        )
    return resource_id


@dataclass
class Resource:
    """
    Common fields of every resource.

    :param id: User-assigned resource id.
    :type id: str
    :param resource_id: Server-assigned ``_rid``.
    :type resource_id: str | None
    :param self_link: Server-assigned ``_self`` link.
    :type self_link: str | None
    :param etag: ``_etag`` for optimistic concurrency.
    :type etag: str | None
    :param timestamp: ``_ts``, last modification time in epoch seconds.
    :type timestamp: int | None
    """

    SYSTEM_KEYS: ClassVar[Tuple[str, ...]] = ("_rid", "_self", "_etag", "_ts")

    id: str
    resource_id: Optional[str] = None
    self_link: Optional[str] = None
    etag: Optional[str] = None
    timestamp: Optional[int] = None

    _client: Optional["AzureDataClient"] = field(default=None, init=False, repr=False, compare=False)

    @staticmethod
    def _system_properties(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "resource_id": data.get("_rid"),
            "self_link": data.get("_self"),
            "etag": data.get("_etag"),
            "timestamp": data.get("_ts"),
        }

    def _system_properties_to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.resource_id is not None:
            out["_rid"] = self.resource_id
        if self.self_link is not None:
            out["_self"] = self.self_link
        if self.etag is not None:
            out["_etag"] = self.etag
        if self.timestamp is not None:
            out["_ts"] = self.timestamp
        return out

    def _bind(self, client: "AzureDataClient"):
        self._client = client
        return self

    def _bound_client(self) -> "AzureDataClient":
        if self._client is None:
            raise ValidationError(
                f"{type(self).__name__} {self.id!r} is not bound to a client; "
                "use the AzureDataClient operations directly."
            )
        return self._client
