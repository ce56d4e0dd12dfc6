"""Test fixtures: fake gateway, sample requests and in-memory storage."""

from .fake_gateway import FakeGateway, json_reply, raw_reply
from .in_memory_storage import FailingKeyValueStore, InMemoryKeyValueStore

__all__ = [
    "FailingKeyValueStore",
    "FakeGateway",
    "InMemoryKeyValueStore",
    "json_reply",
    "raw_reply",
]
