"""Composition tests: middlewares stacked around the Dispatcher."""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from mpesaoverlay.application.dispatcher import Dispatcher
from mpesaoverlay.application.operations import Operation
from mpesaoverlay.env import build_settings
from mpesaoverlay.middleware import (
    LoggingMiddleware,
    MetricsMiddleware,
    PersistenceMiddleware,
    TracingMiddleware,
    with_logger,
    with_metrics,
    with_persistence,
    with_tracing,
)
from mpesaoverlay.sdk import default_middlewares, new_sdk
from tests.fixtures import FakeGateway, InMemoryKeyValueStore, sample_requests


def test_first_factory_is_innermost(build_sdk) -> None:
    sdk = build_sdk(with_persistence(InMemoryKeyValueStore()), with_logger())

    assert isinstance(sdk, LoggingMiddleware)
    assert isinstance(sdk.inner, PersistenceMiddleware)
    assert isinstance(sdk.inner.inner, Dispatcher)


def test_no_middlewares_returns_dispatcher(build_sdk) -> None:
    assert isinstance(build_sdk(), Dispatcher)


def test_default_middlewares_order(settings) -> None:
    sdk = new_sdk(settings, *default_middlewares(settings))

    layers = []
    while not isinstance(sdk, Dispatcher):
        layers.append(type(sdk))
        sdk = sdk.inner
    assert layers == [
        LoggingMiddleware,
        TracingMiddleware,
        MetricsMiddleware,
        PersistenceMiddleware,
    ]


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MPESA_BASE_URL", "https://api.safaricom.co.ke")
    monkeypatch.setenv("MPESA_APP_KEY", "key")
    monkeypatch.setenv("MPESA_APP_SECRET", "secret")

    sdk = new_sdk()

    assert isinstance(sdk, Dispatcher)
    assert sdk.certificate_url.endswith("ProductionCertificate.cer")


@pytest.mark.asyncio
async def test_full_stack_is_transparent(build_sdk, gateway: FakeGateway) -> None:
    """Every operation returns the same envelope with or without observers."""
    store = InMemoryKeyValueStore()
    stack = (
        with_persistence(store),
        with_metrics("mpesaoverlay", registry=CollectorRegistry()),
        with_tracing(),
        with_logger(),
    )

    async with build_sdk() as bare, build_sdk(*stack) as observed:
        assert await observed.get_token() == await bare.get_token()
        for operation, req in sample_requests.valid_requests().items():
            method = operation.snake_name
            expected = await getattr(bare, method)(req)
            assert await getattr(observed, method)(req) == expected, operation

    # One stored row per non-token operation
    assert len(store.keys()) == len(Operation) - 1


@pytest.mark.asyncio
async def test_close_reaches_dispatcher(gateway: FakeGateway) -> None:
    settings = build_settings(
        base_url="https://sandbox.safaricom.co.ke", app_key="k", app_secret="s"
    )
    sdk = new_sdk(settings, with_logger(), transport=gateway.transport)

    await sdk.aclose()

    with pytest.raises(RuntimeError):
        await sdk.get_token()
