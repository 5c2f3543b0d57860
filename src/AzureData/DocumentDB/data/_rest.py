# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level REST client for the Cosmos DB SQL (DocumentDB) API.

:class:`_RestClient` knows how to address resources (links and URLs), build and
sign request headers, execute requests through the retrying HTTP client, and
turn the raw HTTP response into a :class:`_RawResponse` carrying the parsed
body, request details and, on failure, an :class:`HttpError`. Mapping raw
bodies to models happens in the operation namespaces.
"""

from __future__ import annotations

import contextvars
import json
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from email.utils import formatdate
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote

import requests

from ..common.constants import (
    ALL_CONSISTENCY_LEVELS,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_QUERY,
    HEADER_ACTIVITY_ID,
    HEADER_AUTHORIZATION,
    HEADER_CLIENT_REQUEST_ID,
    HEADER_CONSISTENCY_LEVEL,
    HEADER_CONTINUATION,
    HEADER_CORRELATION_ID,
    HEADER_DATE,
    HEADER_ENABLE_CROSS_PARTITION,
    HEADER_ETAG,
    HEADER_IF_MATCH,
    HEADER_IS_QUERY,
    HEADER_IS_UPSERT,
    HEADER_ITEM_COUNT,
    HEADER_MAX_ITEM_COUNT,
    HEADER_OFFER_THROUGHPUT,
    HEADER_PARTITION_KEY,
    HEADER_REQUEST_CHARGE,
    HEADER_RETRY_AFTER_MS,
    HEADER_SESSION_TOKEN,
    HEADER_VERSION,
    RESOURCE_COLLECTION,
    RESOURCE_DATABASE,
    RESOURCE_DOCUMENT,
)
from ..core._auth import _AuthManager
from ..core._error_codes import (
    VALIDATION_CONSISTENCY_LEVEL,
    VALIDATION_PARTITION_KEY_MISSING,
    http_subcode,
    is_transient_status,
)
from ..core._http import _HttpClient
from ..core.config import AzureDataConfig
from ..core.errors import HttpError, ValidationError
from ..core.results import RequestDetails
from ..core.telemetry import telemetry_for
from ..models.partition import PartitionKeyDefinition

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "azuredata_correlation_id", default=None
)

_BODY_EXCERPT_LENGTH = 200


def _active_or_new_correlation_id() -> str:
    """The enclosing scope's correlation id, or a fresh one to open a scope with."""
    return _correlation_id.get() or str(uuid.uuid4())


def database_link(database_id: str) -> str:
    return f"{RESOURCE_DATABASE}/{database_id}"


def collection_link(database_id: str, collection_id: str) -> str:
    return f"{database_link(database_id)}/{RESOURCE_COLLECTION}/{collection_id}"


def document_link(database_id: str, collection_id: str, document_id: str) -> str:
    return f"{collection_link(database_id, collection_id)}/{RESOURCE_DOCUMENT}/{document_id}"


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup that also works on plain dicts."""
    if not headers:
        return None
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _to_float(value: Optional[str]) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def _to_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(float(value)) if value is not None else None
    except ValueError:
        return None


@dataclass(frozen=True)
class _RawResponse:
    """Parsed HTTP outcome before it is mapped onto models."""

    details: RequestDetails
    body: Any = None
    text: str = ""
    error: Optional[HttpError] = None


class _RestClient:
    """Cosmos DB REST client: addressing, signing, execution and error parsing."""

    def __init__(
        self,
        auth: _AuthManager,
        base_url: str,
        config: Optional[AzureDataConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = auth
        self.base_url = (base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("base_url is required.")
        self.config = config or AzureDataConfig.from_env()
        if self.config.consistency_level is not None and self.config.consistency_level not in ALL_CONSISTENCY_LEVELS:
            raise ValidationError(
                f"Unsupported consistency level {self.config.consistency_level!r}.",
                subcode=VALIDATION_CONSISTENCY_LEVEL,
            )
        self._http = _HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            timeout=self.config.http_timeout,
            max_backoff=self.config.http_max_backoff,
            jitter=self.config.http_jitter,
            retry_transient_errors=self.config.http_retry_transient_errors,
            session=session,
        )
        self._telemetry = telemetry_for(self.config.telemetry)
        # Cache: collection link -> partition key definition (None for non-partitioned collections)
        self._partition_key_cache: Dict[str, Optional[PartitionKeyDefinition]] = {}

    def close(self) -> None:
        self._http.close()
        self._partition_key_cache.clear()

    @contextmanager
    def _call_scope(self, correlation_id: Optional[str] = None) -> Iterator[str]:
        """
        Share one correlation id across every request issued inside the scope.

        An enclosing scope wins; otherwise ``correlation_id`` (or a new id) is used.
        """
        existing = _correlation_id.get()
        if existing is not None:
            yield existing
            return
        token = _correlation_id.set(correlation_id or str(uuid.uuid4()))
        try:
            yield _correlation_id.get()
        finally:
            _correlation_id.reset(token)

    # ----------------------------- Headers --------------------------------

    def _headers(
        self,
        method: str,
        resource_type: str,
        resource_link: str,
        client_request_id: str,
        extra: Optional[Dict[str, str]] = None,
    ) -> Dict[str, str]:
        """Build signed request headers for one request."""
        date = formatdate(usegmt=True)
        headers = {
            HEADER_AUTHORIZATION: self.auth._authorization(method, resource_type, resource_link, date),
            HEADER_DATE: date,
            HEADER_VERSION: self.config.api_version,
            HEADER_CLIENT_REQUEST_ID: client_request_id,
            "Accept": CONTENT_TYPE_JSON,
            "Content-Type": CONTENT_TYPE_JSON,
        }
        correlation_id = _correlation_id.get()
        if correlation_id:
            headers[HEADER_CORRELATION_ID] = correlation_id
        if self.config.consistency_level:
            headers[HEADER_CONSISTENCY_LEVEL] = self.config.consistency_level
        headers.update(self._telemetry.extra_headers())
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _partition_key_header(value: Any) -> Dict[str, str]:
        return {HEADER_PARTITION_KEY: json.dumps([value])}

    @staticmethod
    def _throughput_header(throughput: Optional[int]) -> Dict[str, str]:
        return {HEADER_OFFER_THROUGHPUT: str(throughput)} if throughput is not None else {}

    @staticmethod
    def _paging_headers(max_per_page: Optional[int], continuation: Optional[str]) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if max_per_page is not None:
            headers[HEADER_MAX_ITEM_COUNT] = str(max_per_page)
        if continuation:
            headers[HEADER_CONTINUATION] = continuation
        return headers

    # ----------------------------- Execution ------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{quote(path, safe='/')}"

    def _execute(
        self,
        operation: str,
        method: str,
        resource_type: str,
        resource_link: str,
        path: str,
        *,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """
        Sign and send one request, returning the parsed outcome.

        :param operation: Logical operation name used for telemetry (e.g. ``"documents.create"``).
        :param method: HTTP method.
        :param resource_type: Resource type segment used for signing.
        :param resource_link: Resource link used for signing (parent link for feeds).
        :param path: Request path relative to the account endpoint.
        :param body: JSON-serializable request body.
        :param headers: Extra request headers.
        :raises requests.exceptions.RequestException: If the request could not be sent after retries.
        """
        url = self._url(path)
        client_request_id = str(uuid.uuid4())
        request_headers = self._headers(method, resource_type, resource_link, client_request_id, headers)
        kwargs: Dict[str, Any] = {"headers": request_headers}
        if body is not None:
            kwargs["data"] = json.dumps(body)

        started = time.perf_counter()
        with self._telemetry.operation(
            operation,
            method.upper(),
            url,
            client_request_id,
            _correlation_id.get() or "",
            database=database,
            collection=collection,
        ) as ctx:
            r = self._http._request(method, url, **kwargs)
            raw = self._parse(r, method.upper(), url, client_request_id, (time.perf_counter() - started) * 1000)
            self._telemetry.finish(
                ctx,
                raw.details.status_code or 0,
                activity_id=raw.details.activity_id,
                request_charge=raw.details.request_charge,
                error=raw.error,
            )
        return raw

    def _parse(
        self, r: requests.Response, method: str, url: str, client_request_id: str, timing_ms: float
    ) -> _RawResponse:
        headers = getattr(r, "headers", None) or {}
        status = r.status_code
        details = RequestDetails(
            method=method,
            url=url,
            status_code=status,
            client_request_id=client_request_id,
            correlation_id=_correlation_id.get(),
            activity_id=_header(headers, HEADER_ACTIVITY_ID),
            request_charge=_to_float(_header(headers, HEADER_REQUEST_CHARGE)),
            session_token=_header(headers, HEADER_SESSION_TOKEN),
            etag=_header(headers, HEADER_ETAG),
            continuation=_header(headers, HEADER_CONTINUATION),
            item_count=_to_int(_header(headers, HEADER_ITEM_COUNT)),
            timing_ms=timing_ms,
        )
        text = getattr(r, "text", "") or ""
        body: Any = None
        if text:
            try:
                body = r.json()
            except ValueError:
                body = None

        if 200 <= status < 300:
            return _RawResponse(details=details, body=body, text=text)

        service_code: Optional[str] = None
        message = f"HTTP {status}"
        if isinstance(body, dict):
            service_code = body.get("code")
            message = body.get("message") or message
        return _RawResponse(
            details=details,
            body=body,
            text=text,
            error=HttpError(
                message,
                status_code=status,
                is_transient=is_transient_status(status),
                subcode=http_subcode(status),
                service_error_code=service_code,
                activity_id=details.activity_id,
                client_request_id=client_request_id,
                request_charge=details.request_charge,
                body_excerpt=text[:_BODY_EXCERPT_LENGTH] if text and body is None else None,
                retry_after_ms=_to_int(_header(headers, HEADER_RETRY_AFTER_MS)),
            ),
        )

    # ----------------------------- Resource verbs -------------------------

    def _create(
        self,
        operation: str,
        resource_type: str,
        parent_link: str,
        body: Dict[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        upsert: bool = False,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """POST a new resource into the feed under ``parent_link``."""
        extra = dict(headers or {})
        if upsert:
            extra[HEADER_IS_UPSERT] = "True"
        path = f"{parent_link}/{resource_type}" if parent_link else resource_type
        return self._execute(
            operation, "post", resource_type, parent_link, path,
            body=body, headers=extra, database=database, collection=collection,
        )

    def _read(
        self,
        operation: str,
        resource_type: str,
        link: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """GET a single resource by link."""
        return self._execute(
            operation, "get", resource_type, link, link,
            headers=headers, database=database, collection=collection,
        )

    def _read_feed(
        self,
        operation: str,
        resource_type: str,
        parent_link: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """GET the feed of ``resource_type`` under ``parent_link``."""
        path = f"{parent_link}/{resource_type}" if parent_link else resource_type
        return self._execute(
            operation, "get", resource_type, parent_link, path,
            headers=headers, database=database, collection=collection,
        )

    def _replace(
        self,
        operation: str,
        resource_type: str,
        link: str,
        body: Dict[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        etag: Optional[str] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """PUT a full replacement of the resource at ``link``."""
        extra = dict(headers or {})
        if etag:
            extra[HEADER_IF_MATCH] = etag
        return self._execute(
            operation, "put", resource_type, link, link,
            body=body, headers=extra, database=database, collection=collection,
        )

    def _delete(
        self,
        operation: str,
        resource_type: str,
        link: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """DELETE the resource at ``link``."""
        return self._execute(
            operation, "delete", resource_type, link, link,
            headers=headers, database=database, collection=collection,
        )

    def _query(
        self,
        operation: str,
        resource_type: str,
        parent_link: str,
        query: Dict[str, Any],
        *,
        headers: Optional[Dict[str, str]] = None,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> _RawResponse:
        """POST a SQL query against the feed of ``resource_type`` under ``parent_link``."""
        extra = {HEADER_IS_QUERY: "True", "Content-Type": CONTENT_TYPE_QUERY}
        extra.update(headers or {})
        path = f"{parent_link}/{resource_type}" if parent_link else resource_type
        return self._execute(
            operation, "post", resource_type, parent_link, path,
            body=query, headers=extra, database=database, collection=collection,
        )

    @staticmethod
    def _cross_partition_header() -> Dict[str, str]:
        return {HEADER_ENABLE_CROSS_PARTITION: "True"}

    # ----------------------------- Partition keys -------------------------

    def _partition_key_definition(
        self, database_id: str, collection_id: str
    ) -> Tuple[Optional[PartitionKeyDefinition], Optional[_RawResponse]]:
        """
        Return the collection's partition key definition, fetching it once per collection.

        :return: ``(definition, None)``, or ``(None, raw)`` carrying the failed collection read.
            Failures are not cached.
        """
        link = collection_link(database_id, collection_id)
        if link in self._partition_key_cache:
            return self._partition_key_cache[link], None
        raw = self._read(
            "collections.get", RESOURCE_COLLECTION, link, database=database_id, collection=collection_id
        )
        if raw.error is not None:
            return None, raw
        pk = raw.body.get("partitionKey") if isinstance(raw.body, dict) else None
        definition = PartitionKeyDefinition.from_api_response(pk) if pk and pk.get("paths") else None
        self._partition_key_cache[link] = definition
        return definition, None

    def _remember_partition_key(
        self, database_id: str, collection_id: str, definition: Optional[PartitionKeyDefinition]
    ) -> None:
        self._partition_key_cache[collection_link(database_id, collection_id)] = definition

    def _forget_partition_key(self, database_id: str, collection_id: Optional[str] = None) -> None:
        if collection_id is not None:
            self._partition_key_cache.pop(collection_link(database_id, collection_id), None)
            return
        prefix = database_link(database_id) + "/"
        for link in [k for k in self._partition_key_cache if k.startswith(prefix)]:
            del self._partition_key_cache[link]

    def _resolve_partition_key_headers(
        self,
        database_id: str,
        collection_id: str,
        partition_key: Any,
        body: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, str], Optional[_RawResponse]]:
        """
        Headers routing a document request to its partition.

        An explicit ``partition_key`` wins. Otherwise the value is extracted from
        ``body`` using the collection's definition; non-partitioned collections
        get no header. When the collection cannot be read, the headers are empty
        and the failed read is returned alongside them for the caller to report.

        :rtype: tuple[dict[str, str], _RawResponse or None]
        :raises ~AzureData.DocumentDB.core.errors.ValidationError: If the collection is
            partitioned and no value can be found.
        """
        if partition_key is not None:
            return self._partition_key_header(partition_key), None
        definition, failed = self._partition_key_definition(database_id, collection_id)
        if failed is not None:
            return {}, failed
        if definition is None:
            return {}, None
        if body is None:
            raise ValidationError(
                f"Collection {collection_id!r} is partitioned on {definition.paths[0]!r}; pass partition_key.",
                subcode=VALIDATION_PARTITION_KEY_MISSING,
            )
        return self._partition_key_header(definition.extract_value(body)), None
