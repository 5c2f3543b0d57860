# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Unit tests for AzureDataClient context manager support."""

import unittest
from unittest.mock import MagicMock

import requests

from AzureData.DocumentDB.client import AzureDataClient
from AzureData.DocumentDB.core._auth import MasterKeyCredential
from tests.unit.test_helpers import TEST_MASTER_KEY


class TestContextManager(unittest.TestCase):
    def setUp(self):
        self.credential = MasterKeyCredential(TEST_MASTER_KEY)

    def _client(self):
        return AzureDataClient("myaccount", self.credential)

    def test_enter_creates_session(self):
        client = self._client()
        self.assertIsNone(client._session)

        result = client.__enter__()

        self.assertIsInstance(client._session, requests.Session)
        self.assertTrue(client._owns_session)
        self.assertIs(result, client)

    def test_exit_closes_session(self):
        client = self._client()
        client.__enter__()
        mock_session = MagicMock(spec=requests.Session)
        client._session = mock_session

        client.__exit__(None, None, None)

        mock_session.close.assert_called()
        self.assertIsNone(client._session)
        self.assertFalse(client._owns_session)

    def test_context_manager_protocol(self):
        with self._client() as client:
            self.assertIsInstance(client._session, requests.Session)
        self.assertIsNone(client._session)

    def test_close_idempotent_and_without_enter(self):
        client = self._client()
        client.close()
        client.__enter__()
        client.close()
        client.close()
        self.assertIsNone(client._session)

    def test_exit_with_exception(self):
        client = self._client()
        with self.assertRaises(ValueError):
            with client:
                raise ValueError("Test exception")
        self.assertIsNone(client._session)

    def test_session_passed_to_rest_client(self):
        with self._client() as client:
            rest = client._get_rest()
            self.assertIs(rest._http._session, client._session)

    def test_rest_client_rebuilt_when_entering_after_use(self):
        client = self._client()
        before = client._get_rest()
        self.assertIsNone(before._http._session)

        with client:
            after = client._get_rest()
            self.assertIsNot(before, after)
            self.assertIs(after._http._session, client._session)

    def test_close_also_closes_rest_client(self):
        client = self._client()
        mock_rest = MagicMock()
        client._rest = mock_rest

        client.close()

        mock_rest.close.assert_called_once()
        self.assertIsNone(client._rest)

    def test_nested_enter_reuses_session(self):
        client = self._client()
        with client:
            session = client._session
            client.__enter__()
            self.assertIs(client._session, session)
