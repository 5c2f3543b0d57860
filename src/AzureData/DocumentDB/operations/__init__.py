# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the AzureData document DB SDK.

This module contains the operation namespace classes that organize
related operations under intuitive namespaces:
- DatabaseOperations: database create, read, list and delete
- CollectionOperations: collection lifecycle and partition key ranges
- DocumentOperations: document CRUD and SQL queries
"""

__all__ = []
