"""Persistence middleware: store every request in a key-value store.

Rows are written after the inner call returns or raises, so a failed call is
recorded too. Each row lives under ``mpesa:requests:<operation>:<id>`` and
the key is indexed in the sorted set ``mpesa:requests:<operation>`` scored by
the call time.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from ..application.operations import Operation
from ..application.request_dtos import MpesaRequestDTO
from ..domain.shared import MpesaSDK
from ..infrastructure.storage import KeyValueStore
from .base import Call, SDKMiddleware

logger = logging.getLogger(__name__)

KEY_PREFIX = "mpesa:requests"


def index_key(operation: Operation) -> str:
    return f"{KEY_PREFIX}:{operation.value}"


def row_key(operation: Operation, row_id: str) -> str:
    return f"{index_key(operation)}:{row_id}"


class PersistenceMiddleware(SDKMiddleware):
    def __init__(self, sdk: MpesaSDK, store: KeyValueStore) -> None:
        super().__init__(sdk)
        self._store = store

    async def _observe(
        self, operation: Operation, req: Optional[MpesaRequestDTO], call: Call
    ) -> Any:
        if req is None:
            return await call()
        called_at = time.time()
        try:
            return await call()
        finally:
            await self._save(operation, req, called_at)

    async def _save(
        self, operation: Operation, req: MpesaRequestDTO, called_at: float
    ) -> None:
        row_id = str(uuid.uuid4())
        key = row_key(operation, row_id)
        row = {
            "id": row_id,
            "operation": operation.value,
            "created_at": called_at,
            "request": req.to_record(),
        }
        try:
            await self._store.set(key, json.dumps(row))
            await self._store.zadd(index_key(operation), {key: called_at})
        except Exception as e:
            logger.warning("failed to persist %s request: %s", operation.value, e)

    async def recent(self, operation: Operation, limit: int = 10) -> List[Dict[str, Any]]:
        """Return up to ``limit`` stored rows of ``operation``, newest first."""
        keys = await self._store.zrevrange(index_key(operation), 0, limit - 1)
        rows = []
        for key in keys:
            raw = await self._store.get(key)
            if raw is not None:
                rows.append(json.loads(raw))
        return rows

    async def aclose(self) -> None:
        try:
            await super().aclose()
        finally:
            await self._store.close()


def with_persistence(store: KeyValueStore):
    """Return a factory wrapping an SDK in ``PersistenceMiddleware``."""

    def factory(sdk: MpesaSDK) -> MpesaSDK:
        return PersistenceMiddleware(sdk, store)

    return factory
