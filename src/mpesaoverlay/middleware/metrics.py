"""Prometheus metrics middleware.

Each middleware instance owns a private ``CollectorRegistry`` holding a
request counter and a latency histogram per operation, labelled by outcome.
When a push URL is configured the registry is pushed to the Pushgateway
after every call.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, pushadd_to_gateway

from ..application.operations import Operation
from ..application.request_dtos import MpesaRequestDTO
from ..domain.errors import MpesaError, VALIDATION_KINDS
from ..domain.shared import MpesaSDK
from .base import Call, SDKMiddleware

logger = logging.getLogger(__name__)


def metric_prefix(service_name: str, operation: Operation) -> str:
    """Return ``<service>_<operation>`` in Prometheus' snake case."""
    service = re.sub(r"[^a-zA-Z0-9_]", "_", service_name)
    return f"{service}_{operation.snake_name}"


def outcome(error: Optional[BaseException]) -> str:
    if error is None:
        return "success"
    if isinstance(error, MpesaError) and error.kind in VALIDATION_KINDS:
        return "client_error"
    return "error"


class MetricsMiddleware(SDKMiddleware):
    def __init__(
        self,
        sdk: MpesaSDK,
        service_name: str,
        push_url: Optional[str] = None,
        registry: Optional[CollectorRegistry] = None,
    ) -> None:
        super().__init__(sdk)
        self._service_name = service_name
        self._push_url = push_url
        self.registry = registry or CollectorRegistry()
        self._requests: Dict[Operation, Counter] = {}
        self._durations: Dict[Operation, Histogram] = {}

        for operation in Operation:
            prefix = metric_prefix(service_name, operation)
            self._requests[operation] = Counter(
                f"{prefix}_requests_total",
                f"Total {operation.value} requests",
                ["status"],
                registry=self.registry,
            )
            self._durations[operation] = Histogram(
                f"{prefix}_request_duration_seconds",
                f"Wall time of {operation.value} requests",
                ["status"],
                registry=self.registry,
            )

    async def _observe(
        self, operation: Operation, req: Optional[MpesaRequestDTO], call: Call
    ) -> Any:
        start_time = time.perf_counter()
        error: Optional[BaseException] = None
        try:
            return await call()
        except BaseException as e:
            error = e
            raise
        finally:
            status = outcome(error)
            elapsed = time.perf_counter() - start_time
            self._requests[operation].labels(status=status).inc()
            self._durations[operation].labels(status=status).observe(elapsed)
            await self._push()

    async def _push(self) -> None:
        if not self._push_url:
            return
        try:
            # pushadd_to_gateway blocks on urllib
            await asyncio.to_thread(
                pushadd_to_gateway,
                self._push_url,
                job=self._service_name,
                registry=self.registry,
            )
        except Exception as e:
            logger.warning("failed to push metrics to %s: %s", self._push_url, e)


def with_metrics(
    service_name: str,
    push_url: Optional[str] = None,
    registry: Optional[CollectorRegistry] = None,
):
    """Return a factory wrapping an SDK in ``MetricsMiddleware``."""

    def factory(sdk: MpesaSDK) -> MpesaSDK:
        return MetricsMiddleware(sdk, service_name, push_url, registry)

    return factory
