# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Values of HttpError.subcode for common statuses; see http_subcode
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_408 = "http_408"
HTTP_409 = "http_409"
HTTP_412 = "http_412"
HTTP_413 = "http_413"
HTTP_429 = "http_429"
HTTP_449 = "http_449"
HTTP_500 = "http_500"
HTTP_503 = "http_503"

# Statuses the service documents as safe to retry (449 = retry with)
TRANSIENT_STATUS_CODES = {408, 429, 449, 503}

# Validation subcodes
VALIDATION_ID_EMPTY = "validation_id_empty"
VALIDATION_ID_INVALID_CHARACTER = "validation_id_invalid_character"
VALIDATION_ID_TOO_LONG = "validation_id_too_long"
VALIDATION_RESOURCE_TYPE = "validation_resource_type"
VALIDATION_PARTITION_KEY_PATH = "validation_partition_key_path"
VALIDATION_PARTITION_KEY_MISSING = "validation_partition_key_missing"
VALIDATION_QUERY_EMPTY = "validation_query_empty"
VALIDATION_CONSISTENCY_LEVEL = "validation_consistency_level"
VALIDATION_MASTER_KEY = "validation_master_key"
VALIDATION_CREDENTIAL = "validation_credential"


def http_subcode(status: int) -> str:
    """Map an HTTP status code to its ``http_<status>`` subcode string."""
    return f"http_{status}"


def is_transient_status(status: int) -> bool:
    """Whether a response with this status may succeed when retried."""
    return status in TRANSIENT_STATUS_CODES
