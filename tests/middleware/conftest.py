"""Fixtures for middleware tests: a real Dispatcher behind the fake gateway."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import httpx
import pytest

from mpesaoverlay.application.operations import OPERATIONS, Operation
from mpesaoverlay.domain.shared import MpesaSDK, MpesaSDKFactory
from mpesaoverlay.env import Settings
from mpesaoverlay.sdk import new_sdk
from tests.fixtures import FakeGateway, sample_requests


@pytest.fixture
def build_sdk(
    settings: Settings, gateway: FakeGateway
) -> Callable[..., MpesaSDK]:
    def build(*middlewares: MpesaSDKFactory) -> MpesaSDK:
        return new_sdk(settings, *middlewares, transport=gateway.transport)

    return build


@pytest.fixture
def cancel_express_query(
    gateway: FakeGateway,
) -> Callable[[MpesaSDK], Awaitable[None]]:
    """Cancel an ExpressQuery call while the gateway is still answering."""
    started = asyncio.Event()

    async def stall(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    gateway.route(OPERATIONS[Operation.EXPRESS_QUERY].path, stall)

    async def cancel(sdk: MpesaSDK) -> None:
        task = asyncio.create_task(sdk.express_query(sample_requests.express_query()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    return cancel
