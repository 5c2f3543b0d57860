# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Partition key definition and partition key range models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core._error_codes import VALIDATION_PARTITION_KEY_MISSING, VALIDATION_PARTITION_KEY_PATH
from ..core.errors import ValidationError
from .resource import Resource


def _path_segments(path: str) -> List[str]:
    """Split ``/a/"b/c"/d`` into ``["a", "b/c", "d"]``."""
    segments: List[str] = []
    current = ""
    quoted = False
    for ch in path[1:]:
        if ch == '"':
            quoted = not quoted
        elif ch == "/" and not quoted:
            segments.append(current)
            current = ""
        else:
            current += ch
    segments.append(current)
    return segments


@dataclass
class PartitionKeyDefinition:
    """
    Partition key definition of a collection.

    :param paths: Document paths of the partition key, e.g. ``["/testKey"]``.
    :type paths: list[str]
    :param kind: Partitioning kind. Default is ``"Hash"``.
    :type kind: str
    :param version: Hash version (2 enables large partition keys).
    :type version: int | None
    """

    paths: List[str]
    kind: str = "Hash"
    version: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.paths:
            raise ValidationError("Partition key paths cannot be empty.", subcode=VALIDATION_PARTITION_KEY_PATH)
        for path in self.paths:
            if not isinstance(path, str) or not path.startswith("/") or len(path) < 2:
                raise ValidationError(
                    f"Partition key path must start with '/': {path!r}",
                    subcode=VALIDATION_PARTITION_KEY_PATH,
                )

    @classmethod
    def from_path(cls, path: str) -> "PartitionKeyDefinition":
        return cls(paths=[path])

    def extract_value(self, document: Dict[str, Any]) -> Any:
        """
        Read the partition key value from a document body.

        :param document: Document body (as sent to the service).
        :return: The value found at the first partition key path.
        :raises ~AzureData.DocumentDB.core.errors.ValidationError: If the document has no value at that path.
        """
        current: Any = document
        for segment in _path_segments(self.paths[0]):
            if not isinstance(current, dict) or segment not in current:
                raise ValidationError(
                    f"Document has no value for partition key path {self.paths[0]!r}; pass partition_key explicitly.",
                    subcode=VALIDATION_PARTITION_KEY_MISSING,
                    details={"path": self.paths[0]},
                )
            current = current[segment]
        return current

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"paths": list(self.paths), "kind": self.kind}
        if self.version is not None:
            out["version"] = self.version
        return out

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "PartitionKeyDefinition":
        return cls(
            paths=list(data.get("paths") or []),
            kind=data.get("kind", "Hash"),
            version=data.get("version"),
        )


@dataclass
class PartitionKeyRange(Resource):
    """
    Server-assigned partition key range (physical shard) of a collection. Read-only.

    :param min_inclusive: Lower bound of the effective partition key range (hex string).
    :type min_inclusive: str
    :param max_exclusive: Upper bound of the effective partition key range (hex string).
    :type max_exclusive: str
    :param parents: Ids of the ranges this one was split from.
    :type parents: list[str]
    """

    min_inclusive: str = ""
    max_exclusive: str = ""
    resource_id_prefix: Optional[int] = None
    throughput_fraction: Optional[float] = None
    status: Optional[str] = None
    parents: List[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "PartitionKeyRange":
        return cls(
            id=data.get("id", ""),
            min_inclusive=data.get("minInclusive", ""),
            max_exclusive=data.get("maxExclusive", ""),
            resource_id_prefix=data.get("ridPrefix"),
            throughput_fraction=data.get("throughputFraction"),
            status=data.get("status"),
            parents=list(data.get("parents") or []),
            **cls._system_properties(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "minInclusive": self.min_inclusive,
            "maxExclusive": self.max_exclusive,
            "parents": list(self.parents),
        }
        if self.resource_id_prefix is not None:
            out["ridPrefix"] = self.resource_id_prefix
        if self.throughput_fraction is not None:
            out["throughputFraction"] = self.throughput_fraction
        if self.status is not None:
            out["status"] = self.status
        out.update(self._system_properties_to_dict())
        return out
