"""SDK construction: a Dispatcher wrapped in middleware factories."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .application.dispatcher import Dispatcher
from .domain.shared import MpesaSDK, MpesaSDKFactory
from .env import Settings, get_settings
from .infrastructure.database import DatabaseClient
from .infrastructure.storage import RedisKeyValueStore
from .middleware import with_logger, with_metrics, with_persistence, with_tracing

logger = logging.getLogger(__name__)


def new_sdk(
    settings: Optional[Settings] = None,
    *middlewares: MpesaSDKFactory,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> MpesaSDK:
    """Build an SDK from ``settings`` (environment when omitted).

    Middleware factories are applied in order, so the first one wraps the
    Dispatcher directly and the last one is the outermost layer.
    """
    settings = settings or get_settings()
    sdk: MpesaSDK = Dispatcher(settings, transport=transport)
    for middleware in middlewares:
        sdk = middleware(sdk)
    logger.debug(
        "Built SDK for %s with %d middleware(s)", settings.base_url, len(middlewares)
    )
    return sdk


def default_middlewares(settings: Settings) -> List[MpesaSDKFactory]:
    """Return the standard observing stack configured from ``settings``.

    Persistence is innermost and logging outermost, so the log record's
    duration covers every other layer.
    """
    store = RedisKeyValueStore(DatabaseClient(settings))
    return [
        with_persistence(store),
        with_metrics(settings.service_name, settings.metrics_push_url),
        with_tracing(),
        with_logger(),
    ]
