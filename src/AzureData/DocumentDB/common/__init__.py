# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Common constants for the AzureData DocumentDB SDK.

This module contains REST header names, resource path segments and other
shared constants used across the SDK.
"""

__all__ = []
