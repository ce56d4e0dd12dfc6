"""Shared pytest fixtures for the SDK tests."""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from mpesaoverlay.application.dispatcher import Dispatcher
from mpesaoverlay.env import Settings, build_settings
from tests.fixtures import FakeGateway
from tests.fixtures.fake_gateway import SANDBOX_BASE_URL
from tests.fixtures.certificates import make_certificate
from tests.fixtures.sample_requests import INITIATOR_PASSWORD

@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Key pair standing in for the gateway's certificate key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def certificate_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    return make_certificate(rsa_private_key).public_bytes(serialization.Encoding.PEM)


@pytest.fixture
def gateway(certificate_pem: bytes) -> FakeGateway:
    return FakeGateway(certificate_pem)


@pytest.fixture
def settings() -> Settings:
    return build_settings(
        base_url=SANDBOX_BASE_URL,
        app_key="test-app-key",
        app_secret="test-app-secret",
        initiator_name="testapi",
        initiator_password=INITIATOR_PASSWORD,
    )


@pytest_asyncio.fixture
async def dispatcher(
    settings: Settings, gateway: FakeGateway
) -> AsyncGenerator[Dispatcher, None]:
    async with Dispatcher(settings, transport=gateway.transport) as sdk:
        yield sdk
