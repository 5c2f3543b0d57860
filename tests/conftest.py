# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for AzureData DocumentDB tests.

Reusable fakes live in ``tests/unit/test_helpers.py``.
"""

import pytest

from AzureData.DocumentDB.core._auth import MasterKeyCredential
from AzureData.DocumentDB.core.config import AzureDataConfig
from tests.unit.test_helpers import TEST_MASTER_KEY, collection_body, document_body


@pytest.fixture
def master_key_credential():
    return MasterKeyCredential(TEST_MASTER_KEY)


@pytest.fixture
def test_config():
    """Test configuration with safe defaults."""
    return AzureDataConfig(http_retries=1, http_backoff=0.01, http_timeout=5)


@pytest.fixture
def sample_collection():
    return collection_body()


@pytest.fixture
def sample_document():
    return document_body()
