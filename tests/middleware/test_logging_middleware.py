"""Logging middleware tests."""

from __future__ import annotations

import logging

import pytest

from mpesaoverlay.application.request_dtos import ExpressQueryRequestDTO
from mpesaoverlay.domain.errors import ErrorKind, ValidationError
from mpesaoverlay.middleware import LoggingMiddleware, with_logger
from tests.fixtures import sample_requests

LOGGER = "mpesaoverlay.middleware.logging"


@pytest.mark.asyncio
async def test_success_logged_at_info(build_sdk, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER)

    async with build_sdk() as bare, build_sdk(with_logger()) as logged:
        expected = await bare.express_query(sample_requests.express_query())
        resp = await logged.express_query(sample_requests.express_query())

    assert resp == expected
    [record] = [r for r in caplog.records if r.name == LOGGER]
    assert record.levelno == logging.INFO
    assert record.getMessage().startswith("ExpressQuery error=None duration=")
    assert "BusinessShortCode=174379" in record.getMessage()
    assert record.operation == "ExpressQuery"
    assert record.error is None
    assert record.duration >= 0
    assert record.request == {
        "BusinessShortCode": 174379,
        "CheckoutRequestID": "ws_CO_07092023195244460720136609",
    }


@pytest.mark.asyncio
async def test_failure_logged_at_warning_and_reraised(
    build_sdk, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER)

    async with build_sdk(with_logger()) as sdk:
        with pytest.raises(ValidationError) as excinfo:
            await sdk.express_query(ExpressQueryRequestDTO(business_short_code=1))

    assert excinfo.value.kind is ErrorKind.INVALID_SHORT_CODE
    [record] = [r for r in caplog.records if r.name == LOGGER]
    assert record.levelno == logging.WARNING
    assert record.error == "invalid short code"


@pytest.mark.asyncio
async def test_secrets_never_logged(build_sdk, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="mpesaoverlay")

    async with build_sdk(with_logger()) as sdk:
        await sdk.b2c_payment(sample_requests.b2c_payment())

    messages = " ".join(
        r.getMessage() for r in caplog.records if r.name.startswith("mpesaoverlay")
    )
    assert messages
    assert sample_requests.INITIATOR_PASSWORD not in messages
    assert "SecurityCredential" not in messages


@pytest.mark.asyncio
async def test_token_call_logged_without_request_fields(
    build_sdk, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER)

    async with build_sdk(with_logger()) as sdk:
        await sdk.get_token()

    [record] = [r for r in caplog.records if r.name == LOGGER]
    assert record.operation == "GetToken"
    assert record.request == {}


@pytest.mark.asyncio
async def test_custom_logger(build_sdk, caplog: pytest.LogCaptureFixture) -> None:
    custom = logging.getLogger("payments.audit")
    caplog.set_level(logging.INFO, logger="payments.audit")

    async with build_sdk(with_logger(custom)) as sdk:
        assert isinstance(sdk, LoggingMiddleware)
        await sdk.generate_qr(sample_requests.generate_qr())

    assert any(r.name == "payments.audit" for r in caplog.records)


@pytest.mark.asyncio
async def test_cancelled_call_logged_at_warning(
    build_sdk, cancel_express_query, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER)

    async with build_sdk(with_logger()) as sdk:
        await cancel_express_query(sdk)

    [record] = [r for r in caplog.records if r.name == LOGGER]
    assert record.levelno == logging.WARNING
    assert record.error == "CancelledError"
    assert "error=CancelledError" in record.getMessage()
