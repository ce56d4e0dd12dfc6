"""OpenTelemetry tracing middleware."""

from __future__ import annotations

from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ..application.operations import Operation
from ..application.request_dtos import MpesaRequestDTO
from ..domain.shared import MpesaSDK
from .base import Call, SDKMiddleware, observed_attributes

TRACER_NAME = "mpesaoverlay"


class TracingMiddleware(SDKMiddleware):
    """Run every call inside a span named after the operation.

    Selected request fields become ``mpesa.<field>`` attributes. A raised
    error is recorded on the span and re-raised unchanged.
    """

    def __init__(self, sdk: MpesaSDK, tracer: Optional[trace.Tracer] = None) -> None:
        super().__init__(sdk)
        self._tracer = tracer or trace.get_tracer(TRACER_NAME)

    async def _observe(
        self, operation: Operation, req: Optional[MpesaRequestDTO], call: Call
    ) -> Any:
        attributes = {
            f"mpesa.{key}": value
            for key, value in observed_attributes(operation, req).items()
        }
        with self._tracer.start_as_current_span(
            operation.value,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            try:
                result = await call()
            except BaseException as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e) or type(e).__name__))
                raise
            span.set_status(Status(StatusCode.OK))
            return result


def with_tracing(tracer: Optional[trace.Tracer] = None):
    """Return a factory wrapping an SDK in ``TracingMiddleware``."""

    def factory(sdk: MpesaSDK) -> MpesaSDK:
        return TracingMiddleware(sdk, tracer)

    return factory
