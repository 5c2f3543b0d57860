# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Authorization header construction for the Cosmos DB REST API.

Three credential kinds are supported:

- **Master key**: the account's base64 primary or secondary key. Each request is
  signed with HMAC-SHA256 over the verb, resource type, resource link and date.
- **Resource token**: a permission token issued by the service for a user
  (already in ``type=resource&ver=1.0&sig=...`` form).
- **Azure AD**: any :class:`azure.core.credentials.TokenCredential`.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote

from azure.core.credentials import TokenCredential

from ._error_codes import VALIDATION_CREDENTIAL, VALIDATION_MASTER_KEY
from .errors import ValidationError


@dataclass(frozen=True)
class MasterKeyCredential:
    """Account master key (base64, as shown on the portal's Keys blade)."""

    key: str


@dataclass(frozen=True)
class ResourceTokenCredential:
    """Permission (resource) token issued by the service."""

    token: str


Credential = Union[MasterKeyCredential, ResourceTokenCredential, TokenCredential]


def _string_to_sign(verb: str, resource_type: str, resource_link: str, date: str) -> str:
    return f"{verb.lower()}\n{resource_type.lower()}\n{resource_link}\n{date.lower()}\n\n"


class _AuthManager:
    """Builds the ``Authorization`` header value for each request."""

    def __init__(self, credential: Credential, scope: Optional[str] = None) -> None:
        if isinstance(credential, MasterKeyCredential):
            try:
                self._key_bytes: Optional[bytes] = base64.b64decode(credential.key, validate=True)
            except (ValueError, TypeError) as exc:
                raise ValidationError(
                    "Master key must be a base64 encoded string.", subcode=VALIDATION_MASTER_KEY
                ) from exc
        elif isinstance(credential, (ResourceTokenCredential, TokenCredential)):
            self._key_bytes = None
        else:
            raise ValidationError(
                "credential must be a MasterKeyCredential, ResourceTokenCredential "
                "or azure.core.credentials.TokenCredential.",
                subcode=VALIDATION_CREDENTIAL,
            )
        self.credential = credential
        self.scope = scope

    def _authorization(self, verb: str, resource_type: str, resource_link: str, date: str) -> str:
        """
        Return the URL-encoded ``Authorization`` header value.

        :param verb: HTTP method of the request.
        :param resource_type: Resource type segment (``dbs``, ``colls``, ``docs``, ``pkranges``).
        :param resource_link: Link of the addressed resource; for feeds, the link of the parent.
        :param date: The exact value sent in ``x-ms-date``.
        """
        if self._key_bytes is not None:
            payload = _string_to_sign(verb, resource_type, resource_link, date).encode("utf-8")
            digest = hmac.new(self._key_bytes, payload, hashlib.sha256).digest()
            signature = base64.b64encode(digest).decode("utf-8")
            return quote(f"type=master&ver=1.0&sig={signature}", safe="")
        if isinstance(self.credential, ResourceTokenCredential):
            return quote(self.credential.token, safe="")
        token = self.credential.get_token(self.scope).token
        return quote(f"type=aad&ver=1.0&sig={token}", safe="")
