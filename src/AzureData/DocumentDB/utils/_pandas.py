# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Union

import pandas as pd

if TYPE_CHECKING:
    from ..models.document import Document


def _is_missing(value: Any) -> bool:
    return pd.api.types.is_scalar(value) and pd.isna(value)


def dataframe_to_documents(df: pd.DataFrame, na_as_null: bool = False) -> List[Dict[str, Any]]:
    """Convert a DataFrame to a list of document bodies, converting Timestamps to ISO strings.

    :param df: Input DataFrame. An ``id`` column, when present, becomes each document's id.
    :param na_as_null: When False (default), missing values are omitted from each body.
        When True, missing values are included as None.
    """
    documents = []
    for row in df.to_dict(orient="records"):
        clean = {}
        for k, v in row.items():
            if not _is_missing(v):
                clean[str(k)] = v.isoformat() if isinstance(v, pd.Timestamp) else v
            elif na_as_null:
                clean[str(k)] = None
        documents.append(clean)
    return documents


def strip_system_keys(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove system properties (keys starting with '_') from a document body."""
    return {k: v for k, v in document.items() if not k.startswith("_")}


def documents_to_dataframe(documents: Iterable[Union["Document", Mapping[str, Any]]]) -> pd.DataFrame:
    """Build a DataFrame with one row per document and ``id`` as the first column."""
    rows = []
    for doc in documents:
        body = doc.to_dict() if hasattr(doc, "to_dict") else dict(doc)
        rows.append(strip_system_keys(body))
    df = pd.DataFrame(rows)
    if "id" in df.columns:
        df = df[["id"] + [c for c in df.columns if c != "id"]]
    return df
