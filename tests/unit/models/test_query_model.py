# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from AzureData.DocumentDB.core._error_codes import VALIDATION_QUERY_EMPTY
from AzureData.DocumentDB.core.errors import ValidationError
from AzureData.DocumentDB.models.query import Query


class TestQuery:
    def test_to_dict_prefixes_parameter_names(self):
        q = Query("SELECT * FROM c WHERE c.customNumber > @n AND c.testKey = @key", {"n": 10, "@key": "pk"})
        assert q.to_dict() == {
            "query": "SELECT * FROM c WHERE c.customNumber > @n AND c.testKey = @key",
            "parameters": [{"name": "@n", "value": 10}, {"name": "@key", "value": "pk"}],
        }

    def test_no_parameters(self):
        assert Query("SELECT * FROM c").to_dict() == {"query": "SELECT * FROM c", "parameters": []}

    def test_with_parameter_chains(self):
        q = Query("SELECT * FROM c WHERE c.id = @id").with_parameter("id", "doc-1")
        assert q.parameters == {"id": "doc-1"}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_query_rejected(self, text):
        with pytest.raises(ValidationError) as info:
            Query(text)
        assert info.value.subcode == VALIDATION_QUERY_EMPTY

    def test_of_string(self):
        q = Query.of("SELECT * FROM c", {"a": 1})
        assert q == Query("SELECT * FROM c", {"a": 1})

    def test_of_query_returns_same_instance_without_extra_parameters(self):
        q = Query("SELECT * FROM c")
        assert Query.of(q) is q

    def test_of_query_merges_parameters_without_mutating(self):
        q = Query("SELECT * FROM c", {"a": 1})
        merged = Query.of(q, {"b": 2})
        assert merged.parameters == {"a": 1, "b": 2}
        assert q.parameters == {"a": 1}
