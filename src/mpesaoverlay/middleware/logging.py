"""Logging middleware: one record per call."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from ..application.operations import Operation
from ..application.request_dtos import MpesaRequestDTO
from ..domain.shared import MpesaSDK
from .base import Call, SDKMiddleware, observed_attributes

logger = logging.getLogger(__name__)


def describe(error: Optional[BaseException]) -> Optional[str]:
    if error is None:
        return None
    # CancelledError and friends carry no message
    return str(error) or type(error).__name__


class LoggingMiddleware(SDKMiddleware):
    """Log the operation name, error, duration and selected request fields.

    Successful calls are logged at INFO, failed ones at WARNING. The record's
    ``extra`` carries the same fields so structured handlers can pick them up.
    """

    def __init__(self, sdk: MpesaSDK, log: Optional[logging.Logger] = None) -> None:
        super().__init__(sdk)
        self._log = log or logger

    async def _observe(
        self, operation: Operation, req: Optional[MpesaRequestDTO], call: Call
    ) -> Any:
        start = time.perf_counter()
        error: Optional[BaseException] = None
        try:
            return await call()
        except BaseException as e:
            error = e
            raise
        finally:
            self._emit(operation, req, error, time.perf_counter() - start)

    def _emit(
        self,
        operation: Operation,
        req: Optional[MpesaRequestDTO],
        error: Optional[BaseException],
        duration: float,
    ) -> None:
        attrs = observed_attributes(operation, req)
        fields = " ".join(f"{key}={value}" for key, value in attrs.items())
        level = logging.INFO if error is None else logging.WARNING
        self._log.log(
            level,
            "%s error=%s duration=%.6fs %s",
            operation.value,
            describe(error),
            duration,
            fields,
            extra={
                "operation": operation.value,
                "error": describe(error),
                "duration": duration,
                "request": attrs,
            },
        )


def with_logger(log: Optional[logging.Logger] = None):
    """Return a factory wrapping an SDK in ``LoggingMiddleware``."""

    def factory(sdk: MpesaSDK) -> MpesaSDK:
        return LoggingMiddleware(sdk, log)

    return factory
