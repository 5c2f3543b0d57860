# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Parameterized SQL query model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..core._error_codes import VALIDATION_QUERY_EMPTY
from ..core.errors import ValidationError


@dataclass
class Query:
    """
    A SQL query with named parameters.

    Parameter names may be given with or without the leading ``@``.

    :param text: SQL text, e.g. ``"SELECT * FROM c WHERE c.testKey = @key"``.
    :type text: str
    :param parameters: Parameter values by name.
    :type parameters: dict[str, Any]

    Example::

        q = Query("SELECT * FROM c WHERE c.customNumber > @n", {"n": 10})
        page = client.documents.query(q, "people", "appdb")
    """

    text: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValidationError("Query text must be a non-empty string.", subcode=VALIDATION_QUERY_EMPTY)

    def with_parameter(self, name: str, value: Any) -> "Query":
        self.parameters[name] = value
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.text,
            "parameters": [
                {"name": name if name.startswith("@") else f"@{name}", "value": value}
                for name, value in self.parameters.items()
            ],
        }

    @classmethod
    def of(cls, query: Union[str, "Query"], parameters: Optional[Dict[str, Any]] = None) -> "Query":
        """Coerce a string or Query, merging extra ``parameters``."""
        if isinstance(query, Query):
            if not parameters:
                return query
            return cls(query.text, {**query.parameters, **parameters})
        return cls(query, dict(parameters or {}))
