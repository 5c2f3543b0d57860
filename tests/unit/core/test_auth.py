# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import base64
import hashlib
import hmac
import unittest
from unittest.mock import MagicMock
from urllib.parse import unquote

from azure.core.credentials import AccessToken, TokenCredential

from AzureData.DocumentDB.core._auth import (
    MasterKeyCredential,
    ResourceTokenCredential,
    _AuthManager,
    _string_to_sign,
)
from AzureData.DocumentDB.core._error_codes import VALIDATION_CREDENTIAL, VALIDATION_MASTER_KEY
from AzureData.DocumentDB.core.errors import ValidationError

KEY = base64.b64encode(b"0123456789abcdef").decode("ascii")
DATE = "Tue, 01 Aug 2023 10:00:00 GMT"


class TestStringToSign(unittest.TestCase):
    def test_lowercases_verb_type_and_date_but_not_link(self):
        payload = _string_to_sign("GET", "COLLS", "dbs/AppDb", DATE)
        self.assertEqual(payload, "get\ncolls\ndbs/AppDb\ntue, 01 aug 2023 10:00:00 gmt\n\n")


class TestMasterKeyAuth(unittest.TestCase):
    def test_signature_matches_hmac_of_payload(self):
        auth = _AuthManager(MasterKeyCredential(KEY))

        header = auth._authorization("post", "docs", "dbs/appdb/colls/people", DATE)

        payload = _string_to_sign("post", "docs", "dbs/appdb/colls/people", DATE).encode("utf-8")
        expected_sig = base64.b64encode(
            hmac.new(base64.b64decode(KEY), payload, hashlib.sha256).digest()
        ).decode("utf-8")
        self.assertEqual(unquote(header), f"type=master&ver=1.0&sig={expected_sig}")

    def test_header_is_url_encoded(self):
        header = _AuthManager(MasterKeyCredential(KEY))._authorization("get", "dbs", "", DATE)
        self.assertNotIn("&", header)
        self.assertNotIn("=", header)
        self.assertTrue(header.startswith("type%3Dmaster%26ver%3D1.0%26sig%3D"))

    def test_signature_depends_on_resource_link(self):
        auth = _AuthManager(MasterKeyCredential(KEY))
        a = auth._authorization("get", "colls", "dbs/one", DATE)
        b = auth._authorization("get", "colls", "dbs/two", DATE)
        self.assertNotEqual(a, b)

    def test_invalid_base64_key_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            _AuthManager(MasterKeyCredential("not base64!"))
        self.assertEqual(ctx.exception.subcode, VALIDATION_MASTER_KEY)


class TestOtherCredentials(unittest.TestCase):
    def test_resource_token_sent_as_is(self):
        token = "type=resource&ver=1.0&sig=abc"
        header = _AuthManager(ResourceTokenCredential(token))._authorization("get", "docs", "dbs/a/colls/b", DATE)
        self.assertEqual(unquote(header), token)

    def test_token_credential_uses_scope(self):
        credential = MagicMock(spec=TokenCredential)
        credential.get_token.return_value = AccessToken("aad-token", 0)
        auth = _AuthManager(credential, scope="https://myaccount.documents.azure.com/.default")

        header = auth._authorization("get", "dbs", "", DATE)

        credential.get_token.assert_called_once_with("https://myaccount.documents.azure.com/.default")
        self.assertEqual(unquote(header), "type=aad&ver=1.0&sig=aad-token")

    def test_unsupported_credential_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            _AuthManager("plain-string-key")
        self.assertEqual(ctx.exception.subcode, VALIDATION_CREDENTIAL)
