# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request telemetry for the AzureData DocumentDB SDK.

Each REST call runs inside an :class:`OperationContext`. Depending on
:class:`TelemetryConfig`, the call produces an OpenTelemetry client span tagged
with the Cosmos DB database, collection and request charge. It can also record
latency, request units and throttling metrics, emit a log record, and notify
user hooks.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Union, runtime_checkable

from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from ..common.constants import (
    DB_SYSTEM_COSMOSDB,
    OTEL_ATTR_COSMOS_ACTIVITY_ID,
    OTEL_ATTR_COSMOS_CLIENT_ID,
    OTEL_ATTR_COSMOS_CONTAINER,
    OTEL_ATTR_COSMOS_CORRELATION_ID,
    OTEL_ATTR_COSMOS_REQUEST_CHARGE,
    OTEL_ATTR_COSMOS_STATUS_CODE,
    OTEL_ATTR_DB_NAME,
    OTEL_ATTR_DB_OPERATION,
    OTEL_ATTR_DB_SYSTEM,
    OTEL_ATTR_HTTP_METHOD,
    OTEL_ATTR_HTTP_URL,
)

_INSTRUMENTATION_NAME = "AzureData.DocumentDB"
_SCHEMA_URL = "https://opentelemetry.io/schemas/1.21.0"
_STATUS_THROTTLED = 429

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryConfig:
    """
    Telemetry settings. Everything is off by default.

    :param enable_tracing: Emit one OpenTelemetry client span per REST call.
    :param enable_metrics: Record latency, request-unit and throttling instruments.
    :param enable_logging: Log one record per REST call on ``logger_name``.
    :param log_level: Level applied to the SDK logger when logging is enabled. Defaults to
        ``"INFO"`` when ``expensive_request_charge`` is set and ``"WARNING"`` otherwise.
    :param logger_name: Logger used for request records.
    :param expensive_request_charge: When set, successful calls charging at least this
        many request units are logged at INFO instead of DEBUG.
    :param hooks: Objects implementing any subset of :class:`TelemetryHook`.

    Example::

        config = AzureDataConfig(
            telemetry=TelemetryConfig(enable_tracing=True, enable_logging=True, expensive_request_charge=50)
        )
    """

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    log_level: Optional[str] = None
    logger_name: str = "AzureData.DocumentDB"
    expensive_request_charge: Optional[float] = None
    hooks: List["TelemetryHook"] = field(default_factory=list)

    @property
    def is_enabled(self) -> bool:
        return bool(self.enable_tracing or self.enable_metrics or self.enable_logging or self.hooks)

    @property
    def effective_log_level(self) -> str:
        if self.log_level:
            return self.log_level.upper()
        return "INFO" if self.expensive_request_charge is not None else "WARNING"


@dataclass
class OperationContext:
    """One REST call as seen by telemetry hooks."""

    operation: str  # "documents.create", "collections.list", ...
    method: str
    url: str
    client_request_id: str
    correlation_id: str
    database: Optional[str] = None
    collection: Optional[str] = None
    started: float = field(default_factory=time.perf_counter)
    # Free-form state hooks may share between start and end.
    custom_data: Dict[str, Any] = field(default_factory=dict)
    _span: Any = field(default=None, repr=False)

    @property
    def resource_path(self) -> str:
        """``database/collection`` (or less) for log lines."""
        return "/".join(p for p in (self.database, self.collection) if p) or "-"


@dataclass
class OperationOutcome:
    """What came back for one REST call."""

    status_code: int
    duration_ms: float
    activity_id: Optional[str] = None
    request_charge: Optional[float] = None
    error: Optional[Exception] = None

    @property
    def throttled(self) -> bool:
        return self.status_code == _STATUS_THROTTLED

    @property
    def failed(self) -> bool:
        return self.status_code >= 400


@runtime_checkable
class TelemetryHook(Protocol):
    """
    Callbacks for custom telemetry. Implement only the methods you need;
    exceptions raised by hooks are logged and ignored.

    Example::

        class RequestUnitBudget:
            def __init__(self):
                self.spent = 0.0

            def on_request_end(self, context, outcome):
                self.spent += outcome.request_charge or 0.0
    """

    def on_request_start(self, context: OperationContext) -> None: ...

    def on_request_end(self, context: OperationContext, outcome: OperationOutcome) -> None: ...

    def on_request_error(self, context: OperationContext, error: Exception) -> None: ...

    def get_additional_headers(self) -> Dict[str, str]: ...


class OperationTelemetry:
    """Active telemetry for a REST client. Internal."""

    def __init__(self, config: TelemetryConfig) -> None:
        self._config = config
        self._hooks = list(config.hooks)
        self._tracer = (
            trace.get_tracer(_INSTRUMENTATION_NAME, schema_url=_SCHEMA_URL) if config.enable_tracing else None
        )
        self._meter = (
            metrics.get_meter(_INSTRUMENTATION_NAME, schema_url=_SCHEMA_URL) if config.enable_metrics else None
        )
        self._instruments: Dict[str, Any] = {}
        if self._meter is not None:
            self._instruments = {
                "duration": self._meter.create_histogram(
                    "azuredata.client.operation.duration", unit="ms", description="Latency of REST calls"
                ),
                "request_charge": self._meter.create_histogram(
                    "azuredata.client.request_charge", unit="RU", description="Request units charged per call"
                ),
                "errors": self._meter.create_counter(
                    "azuredata.client.errors", unit="1", description="REST calls answered with a 4xx or 5xx"
                ),
                "throttles": self._meter.create_counter(
                    "azuredata.client.throttles", unit="1", description="REST calls answered with 429"
                ),
            }
        self._logger: Optional[logging.Logger] = None
        if config.enable_logging:
            self._logger = logging.getLogger(config.logger_name)
            self._logger.setLevel(getattr(logging, config.effective_log_level))

    @property
    def is_tracing_enabled(self) -> bool:
        return self._tracer is not None

    @property
    def is_metrics_enabled(self) -> bool:
        return self._meter is not None

    @contextmanager
    def operation(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        correlation_id: str,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> Iterator[OperationContext]:
        """
        Wrap one REST call. Call :meth:`finish` inside the block once a response
        arrives; exceptions escaping the block mark the span as failed.
        """
        ctx = OperationContext(operation, method, url, client_request_id, correlation_id, database, collection)
        self._notify("on_request_start", ctx)
        if self._tracer is not None:
            ctx._span = self._tracer.start_span(
                operation, kind=trace.SpanKind.CLIENT, attributes=self._span_attributes(ctx)
            )
        try:
            yield ctx
        except Exception as exc:
            if ctx._span is not None:
                ctx._span.record_exception(exc)
                ctx._span.set_status(Status(StatusCode.ERROR, str(exc)))
            self._notify("on_request_error", ctx, exc)
            raise
        finally:
            if ctx._span is not None:
                ctx._span.end()

    @staticmethod
    def _span_attributes(ctx: OperationContext) -> Dict[str, Any]:
        attributes: Dict[str, Any] = {
            OTEL_ATTR_DB_SYSTEM: DB_SYSTEM_COSMOSDB,
            OTEL_ATTR_DB_OPERATION: ctx.operation,
            OTEL_ATTR_HTTP_METHOD: ctx.method,
            OTEL_ATTR_HTTP_URL: ctx.url,
            OTEL_ATTR_COSMOS_CLIENT_ID: ctx.client_request_id,
            OTEL_ATTR_COSMOS_CORRELATION_ID: ctx.correlation_id,
        }
        if ctx.database:
            attributes[OTEL_ATTR_DB_NAME] = ctx.database
        if ctx.collection:
            attributes[OTEL_ATTR_COSMOS_CONTAINER] = ctx.collection
        return attributes

    def finish(
        self,
        ctx: OperationContext,
        status_code: int,
        activity_id: Optional[str] = None,
        request_charge: Optional[float] = None,
        error: Optional[Exception] = None,
    ) -> OperationOutcome:
        """Record the response of a call opened with :meth:`operation`."""
        outcome = OperationOutcome(
            status_code=status_code,
            duration_ms=(time.perf_counter() - ctx.started) * 1000,
            activity_id=activity_id,
            request_charge=request_charge,
            error=error,
        )
        span = ctx._span
        if span is not None:
            span.set_attribute(OTEL_ATTR_COSMOS_STATUS_CODE, status_code)
            if activity_id:
                span.set_attribute(OTEL_ATTR_COSMOS_ACTIVITY_ID, activity_id)
            if request_charge is not None:
                span.set_attribute(OTEL_ATTR_COSMOS_REQUEST_CHARGE, request_charge)
            if outcome.failed:
                span.set_status(Status(StatusCode.ERROR, f"HTTP {status_code}"))

        if self._instruments:
            labels = {"operation": ctx.operation, "status_code": status_code}
            self._instruments["duration"].record(outcome.duration_ms, labels)
            if request_charge is not None:
                self._instruments["request_charge"].record(request_charge, labels)
            if outcome.failed:
                self._instruments["errors"].add(1, labels)
            if outcome.throttled:
                self._instruments["throttles"].add(1, labels)

        if self._logger is not None:
            self._logger.log(
                self._log_level_for(outcome),
                "%s %s %s -> %s (%.1f ms, %s RU)",
                ctx.operation,
                ctx.method,
                ctx.resource_path,
                status_code,
                outcome.duration_ms,
                "?" if request_charge is None else f"{request_charge:g}",
                extra={"client_request_id": ctx.client_request_id, "activity_id": activity_id},
            )

        self._notify("on_request_end", ctx, outcome)
        return outcome

    def _log_level_for(self, outcome: OperationOutcome) -> int:
        if outcome.failed:
            return logging.WARNING
        threshold = self._config.expensive_request_charge
        if threshold is not None and (outcome.request_charge or 0.0) >= threshold:
            return logging.INFO
        return logging.DEBUG

    def _notify(self, callback: str, *args: Any) -> None:
        for hook in self._hooks:
            method = getattr(hook, callback, None)
            if method is None:
                continue
            try:
                method(*args)
            except Exception:
                _log.debug("Telemetry hook %s.%s failed", type(hook).__name__, callback, exc_info=True)

    def extra_headers(self) -> Dict[str, str]:
        """Headers contributed by hooks, later hooks winning."""
        headers: Dict[str, str] = {}
        for hook in self._hooks:
            method = getattr(hook, "get_additional_headers", None)
            if method is None:
                continue
            try:
                headers.update(method() or {})
            except Exception:
                _log.debug("Telemetry hook %s.get_additional_headers failed", type(hook).__name__, exc_info=True)
        return headers


class NullTelemetry:
    """Stand-in used when telemetry is disabled."""

    is_tracing_enabled = False
    is_metrics_enabled = False

    @contextmanager
    def operation(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        correlation_id: str,
        database: Optional[str] = None,
        collection: Optional[str] = None,
    ) -> Iterator[OperationContext]:
        yield OperationContext(operation, method, url, client_request_id, correlation_id, database, collection)

    def finish(self, ctx: OperationContext, status_code: int, **_: Any) -> None:
        return None

    def extra_headers(self) -> Dict[str, str]:
        return {}


def telemetry_for(config: Optional[TelemetryConfig]) -> Union[OperationTelemetry, NullTelemetry]:
    """Return active telemetry for ``config``, or :class:`NullTelemetry` when nothing is enabled."""
    if config is None or not config.is_enabled:
        return NullTelemetry()
    return OperationTelemetry(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "OperationContext",
    "OperationOutcome",
    "OperationTelemetry",
    "NullTelemetry",
    "telemetry_for",
]
