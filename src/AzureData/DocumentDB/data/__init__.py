# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data access layer for the AzureData DocumentDB SDK.

This module contains the REST client that signs, sends and parses requests
against the Cosmos DB SQL API.
"""

__all__ = []
