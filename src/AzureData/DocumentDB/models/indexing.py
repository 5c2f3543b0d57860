# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Indexing policy models.

An indexing policy controls which document paths the service indexes and how.
Policies are built locally before a create/replace call, or parsed from the
``indexingPolicy`` of a returned collection.

Example::

    policy = (
        IndexingPolicy(automatic=True, mode=IndexingMode.LAZY)
        .include("/*", Index.range(DataType.NUMBER, -1), Index.hash(DataType.STRING, 3), Index.spatial(DataType.POINT))
        .exclude("/test/*")
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


class IndexingMode(str, Enum):
    CONSISTENT = "consistent"
    LAZY = "lazy"
    NONE = "none"


class IndexKind(str, Enum):
    HASH = "Hash"
    RANGE = "Range"
    SPATIAL = "Spatial"


class DataType(str, Enum):
    STRING = "String"
    NUMBER = "Number"
    POINT = "Point"
    POLYGON = "Polygon"
    LINE_STRING = "LineString"
    MULTI_POLYGON = "MultiPolygon"


def _enum_value(enum_cls: Type[E], value: Any) -> E:
    """Case-insensitive enum lookup; the service is not consistent about casing."""
    if isinstance(value, enum_cls):
        return value
    text = str(value).lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


@dataclass
class Index:
    """
    A single index on an included path.

    :param kind: Index kind.
    :type kind: IndexKind
    :param data_type: Data type indexed.
    :type data_type: DataType
    :param precision: Index precision; -1 means maximum. Not used by spatial indexes.
    :type precision: int | None
    """

    kind: IndexKind
    data_type: DataType
    precision: Optional[int] = None

    @classmethod
    def hash(cls, data_type: DataType, precision: Optional[int] = None) -> "Index":
        return cls(IndexKind.HASH, data_type, precision)

    @classmethod
    def range(cls, data_type: DataType, precision: Optional[int] = None) -> "Index":
        return cls(IndexKind.RANGE, data_type, precision)

    @classmethod
    def spatial(cls, data_type: DataType) -> "Index":
        return cls(IndexKind.SPATIAL, data_type)

    def matches(self, other: "Index") -> bool:
        """Whether ``other`` has the same kind and data type, and the same precision when this index sets one."""
        if self.kind != other.kind or self.data_type != other.data_type:
            return False
        return self.precision is None or self.precision == other.precision

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind.value, "dataType": self.data_type.value}
        if self.precision is not None:
            out["precision"] = self.precision
        return out

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Index":
        return cls(
            kind=_enum_value(IndexKind, data.get("kind")),
            data_type=_enum_value(DataType, data.get("dataType")),
            precision=data.get("precision"),
        )


@dataclass
class IncludedPath:
    """
    A path included in the index, with its indexes.

    ``indexes`` is None when the service manages indexes for the path itself.
    """

    path: str
    indexes: Optional[List[Index]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"path": self.path}
        if self.indexes is not None:
            out["indexes"] = [i.to_dict() for i in self.indexes]
        return out

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "IncludedPath":
        raw = data.get("indexes")
        indexes = [Index.from_api_response(i) for i in raw] if isinstance(raw, list) else None
        return cls(path=data.get("path", ""), indexes=indexes)


@dataclass
class ExcludedPath:
    path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path}

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "ExcludedPath":
        return cls(path=data.get("path", ""))


@dataclass
class IndexingPolicy:
    """
    Indexing policy of a collection.

    :param automatic: Whether documents are indexed automatically.
    :type automatic: bool
    :param mode: Indexing mode.
    :type mode: IndexingMode
    :param included_paths: Paths to index, in order.
    :type included_paths: list[IncludedPath]
    :param excluded_paths: Paths excluded from indexing, in order.
    :type excluded_paths: list[ExcludedPath]
    :param extra: Unrecognised policy members (e.g. composite indexes), sent back unchanged on replace.
    :type extra: dict[str, Any]
    """

    automatic: bool = True
    mode: IndexingMode = IndexingMode.CONSISTENT
    included_paths: List[IncludedPath] = field(default_factory=list)
    excluded_paths: List[ExcludedPath] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def include(self, path: str, *indexes: Index) -> "IndexingPolicy":
        """Append an included path; with no indexes the service chooses them."""
        self.included_paths.append(IncludedPath(path, list(indexes) if indexes else None))
        return self

    def exclude(self, path: str) -> "IndexingPolicy":
        """Append an excluded path."""
        self.excluded_paths.append(ExcludedPath(path))
        return self

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out.update(
            automatic=self.automatic,
            indexingMode=self.mode.value,
            includedPaths=[p.to_dict() for p in self.included_paths],
            excludedPaths=[p.to_dict() for p in self.excluded_paths],
        )
        return out

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "IndexingPolicy":
        known = {"automatic", "indexingMode", "includedPaths", "excludedPaths"}
        return cls(
            automatic=bool(data.get("automatic", True)),
            mode=_enum_value(IndexingMode, data.get("indexingMode", IndexingMode.CONSISTENT.value)),
            included_paths=[IncludedPath.from_api_response(p) for p in data.get("includedPaths") or []],
            excluded_paths=[ExcludedPath.from_api_response(p) for p in data.get("excludedPaths") or []],
            extra={k: v for k, v in data.items() if k not in known},
        )

    def is_equivalent_to(self, other: "IndexingPolicy") -> bool:
        """Shorthand for ``not compare_indexing_policies(self, other)``."""
        return not compare_indexing_policies(self, other)


def compare_indexing_policies(expected: IndexingPolicy, actual: IndexingPolicy) -> List[str]:
    """
    Compare a requested indexing policy with the one the service returned.

    Every expected included path must be present in ``actual`` (matched by path
    string). Where both sides list indexes for a matched path, the counts must be
    equal and each expected index must have a returned index of the same kind and
    data type (and precision, when the expected index sets one). Every expected
    excluded path must be present by path string. Paths the service adds on its
    own (such as ``/"_etag"/?``) are ignored.

    :return: Mismatch descriptions; empty when the policies are equivalent.
    :rtype: list[str]
    """
    problems: List[str] = []

    if expected.automatic != actual.automatic:
        problems.append(f"automatic: expected {expected.automatic}, got {actual.automatic}")
    if expected.mode != actual.mode:
        problems.append(f"indexing mode: expected {expected.mode.value}, got {actual.mode.value}")

    actual_included = {p.path: p for p in actual.included_paths}
    for path in expected.included_paths:
        match = actual_included.get(path.path)
        if match is None:
            problems.append(f"included path {path.path!r} not found")
            continue
        if path.indexes is None or match.indexes is None:
            continue
        if len(path.indexes) != len(match.indexes):
            problems.append(
                f"included path {path.path!r}: expected {len(path.indexes)} indexes, got {len(match.indexes)}"
            )
            continue
        for index in path.indexes:
            if not any(index.matches(candidate) for candidate in match.indexes):
                problems.append(
                    f"included path {path.path!r}: index {index.kind.value}/{index.data_type.value} not found"
                )

    actual_excluded = {p.path for p in actual.excluded_paths}
    for path in expected.excluded_paths:
        if path.path not in actual_excluded:
            problems.append(f"excluded path {path.path!r} not found")

    return problems
