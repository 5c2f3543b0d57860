# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for the AzureData DocumentDB SDK.

This module provides dataclasses mirroring the service's JSON resources:

- :class:`~AzureData.DocumentDB.models.database.Database`: Database resource.
- :class:`~AzureData.DocumentDB.models.collection.DocumentCollection`: Collection resource.
- :class:`~AzureData.DocumentDB.models.document.Document`: Document with dict-like access.
- :class:`~AzureData.DocumentDB.models.indexing.IndexingPolicy`: Indexing policy and its paths and indexes.
- :class:`~AzureData.DocumentDB.models.partition.PartitionKeyDefinition`: Partition key of a collection.
- :class:`~AzureData.DocumentDB.models.partition.PartitionKeyRange`: Server-assigned partition key range.
- :class:`~AzureData.DocumentDB.models.query.Query`: Parameterized SQL query.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from
    the specific module files.
"""

__all__ = []
