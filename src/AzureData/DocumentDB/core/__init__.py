# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the AzureData DocumentDB SDK.

This module contains the foundational components including authentication,
configuration, HTTP client, response envelopes and error handling.
"""

from .results import (
    RequestDetails,
    ResourceList,
    Response,
    ListResponse,
    DataResponse,
)

__all__ = [
    "RequestDetails",
    "ResourceList",
    "Response",
    "ListResponse",
    "DataResponse",
]
