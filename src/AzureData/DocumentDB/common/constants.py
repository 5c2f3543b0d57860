# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Azure Cosmos DB (DocumentDB) REST API.

These constants define the resource path segments, HTTP header names and
well-known header values used in REST requests and responses.
"""

# REST API version sent in ``x-ms-version``
API_VERSION = "2018-12-31"

# Resource type path segments (also used when signing requests)
RESOURCE_DATABASE = "dbs"
RESOURCE_COLLECTION = "colls"
RESOURCE_DOCUMENT = "docs"
RESOURCE_PARTITION_KEY_RANGE = "pkranges"

# Keys of the resource arrays inside list (feed) responses
LIST_KEY_DATABASES = "Databases"
LIST_KEY_COLLECTIONS = "DocumentCollections"
LIST_KEY_DOCUMENTS = "Documents"
LIST_KEY_PARTITION_KEY_RANGES = "PartitionKeyRanges"

# Request headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_DATE = "x-ms-date"
HEADER_VERSION = "x-ms-version"
HEADER_CLIENT_REQUEST_ID = "x-ms-client-request-id"
HEADER_CORRELATION_ID = "x-ms-correlation-id"
HEADER_OFFER_THROUGHPUT = "x-ms-offer-throughput"
HEADER_PARTITION_KEY = "x-ms-documentdb-partitionkey"
HEADER_IS_UPSERT = "x-ms-documentdb-is-upsert"
HEADER_IS_QUERY = "x-ms-documentdb-isquery"
HEADER_ENABLE_CROSS_PARTITION = "x-ms-documentdb-query-enablecrosspartition"
HEADER_MAX_ITEM_COUNT = "x-ms-max-item-count"
HEADER_CONTINUATION = "x-ms-continuation"
HEADER_CONSISTENCY_LEVEL = "x-ms-consistency-level"
HEADER_SESSION_TOKEN = "x-ms-session-token"
HEADER_IF_MATCH = "If-Match"

# Response headers
HEADER_ACTIVITY_ID = "x-ms-activity-id"
HEADER_REQUEST_CHARGE = "x-ms-request-charge"
HEADER_ITEM_COUNT = "x-ms-item-count"
HEADER_RETRY_AFTER_MS = "x-ms-retry-after-ms"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_ETAG = "etag"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_QUERY = "application/query+json"

# Provisioned throughput bounds (request units per second)
MIN_THROUGHPUT = 400
"""Smallest throughput accepted for a database or collection."""

MAX_THROUGHPUT = 100000
"""Largest throughput accepted without a support request."""

# Consistency levels accepted in ``x-ms-consistency-level``
CONSISTENCY_STRONG = "Strong"
CONSISTENCY_BOUNDED_STALENESS = "BoundedStaleness"
CONSISTENCY_SESSION = "Session"
CONSISTENCY_EVENTUAL = "Eventual"
CONSISTENCY_CONSISTENT_PREFIX = "ConsistentPrefix"

ALL_CONSISTENCY_LEVELS = {
    CONSISTENCY_STRONG,
    CONSISTENCY_BOUNDED_STALENESS,
    CONSISTENCY_SESSION,
    CONSISTENCY_EVENTUAL,
    CONSISTENCY_CONSISTENT_PREFIX,
}

# OpenTelemetry attribute names (database client and Cosmos DB conventions)
OTEL_ATTR_DB_SYSTEM = "db.system"
OTEL_ATTR_DB_OPERATION = "db.operation"
OTEL_ATTR_DB_NAME = "db.name"
OTEL_ATTR_HTTP_METHOD = "http.method"
OTEL_ATTR_HTTP_URL = "http.url"
OTEL_ATTR_COSMOS_CONTAINER = "db.cosmosdb.container"
OTEL_ATTR_COSMOS_STATUS_CODE = "db.cosmosdb.status_code"
OTEL_ATTR_COSMOS_REQUEST_CHARGE = "db.cosmosdb.request_charge"
OTEL_ATTR_COSMOS_CLIENT_ID = "db.cosmosdb.client_id"
OTEL_ATTR_COSMOS_CORRELATION_ID = "db.cosmosdb.correlation_id"
OTEL_ATTR_COSMOS_ACTIVITY_ID = "db.cosmosdb.activity_id"

DB_SYSTEM_COSMOSDB = "cosmosdb"
