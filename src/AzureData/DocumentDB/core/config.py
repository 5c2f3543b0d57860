# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from ..common.constants import API_VERSION
from .telemetry import TelemetryConfig

_T = TypeVar("_T")

ENV_API_VERSION = "AZURE_DATA_API_VERSION"
ENV_CONSISTENCY_LEVEL = "AZURE_DATA_CONSISTENCY_LEVEL"
ENV_HTTP_RETRIES = "AZURE_DATA_HTTP_RETRIES"
ENV_HTTP_TIMEOUT = "AZURE_DATA_HTTP_TIMEOUT"


def _env_value(environ: Mapping[str, str], name: str, parse: Callable[[str], _T]) -> Optional[_T]:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse(raw)
    except ValueError as exc:
        raise ValueError(f"{name}={raw!r} is not a valid value.") from exc


@dataclass(frozen=True)
class AzureDataConfig:
    """
    Client settings. ``None`` means "use the default" everywhere.

    :param api_version: REST API version sent in ``x-ms-version``. Default is ``"2018-12-31"``.
    :type api_version: str
    :param consistency_level: Consistency override sent in ``x-ms-consistency-level``
        (``"Strong"``, ``"BoundedStaleness"``, ``"Session"``, ``"Eventual"``, ``"ConsistentPrefix"``).
        May only weaken the account's level; None keeps the account default.
    :type consistency_level: str or None
    :param http_retries: Attempts per request, including the first (default: 5).
    :type http_retries: int or None
    :param http_backoff: First retry delay in seconds, doubled per attempt (default: 0.5).
    :type http_backoff: float or None
    :param http_max_backoff: Cap on a single retry delay, including ``x-ms-retry-after-ms`` hints (default: 60.0).
    :type http_max_backoff: float or None
    :param http_timeout: Timeout for every request in seconds (default: 10 for reads, 60 for writes).
    :type http_timeout: float or None
    :param http_jitter: Randomize computed retry delays (default: True).
    :type http_jitter: bool or None
    :param http_retry_transient_errors: Retry 408, 429, 449 and 503 responses (default: True).
    :type http_retry_transient_errors: bool or None
    :param telemetry: Tracing, metrics, logging and hooks. None disables telemetry.
    :type telemetry: ~AzureData.DocumentDB.core.telemetry.TelemetryConfig or None
    """

    api_version: str = API_VERSION
    consistency_level: Optional[str] = None

    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_max_backoff: Optional[float] = None
    http_timeout: Optional[float] = None
    http_jitter: Optional[bool] = None
    http_retry_transient_errors: Optional[bool] = None

    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AzureDataConfig":
        """
        Build a configuration from ``AZURE_DATA_*`` environment variables.

        Reads ``AZURE_DATA_API_VERSION``, ``AZURE_DATA_CONSISTENCY_LEVEL``,
        ``AZURE_DATA_HTTP_RETRIES`` and ``AZURE_DATA_HTTP_TIMEOUT``. Unset
        variables leave the corresponding setting at its default.

        :param environ: Mapping to read instead of :data:`os.environ`.
        :type environ: Mapping[str, str] or None
        :return: Configuration instance.
        :rtype: ~AzureData.DocumentDB.core.config.AzureDataConfig
        :raises ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        return cls(
            api_version=_env_value(env, ENV_API_VERSION, str) or API_VERSION,
            consistency_level=_env_value(env, ENV_CONSISTENCY_LEVEL, str),
            http_retries=_env_value(env, ENV_HTTP_RETRIES, int),
            http_timeout=_env_value(env, ENV_HTTP_TIMEOUT, float),
        )
