"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
for all tests: store settings, a small catalog, a recording notification
channel and a factory for isolated storefronts.
"""

import sys
import os
from datetime import datetime
from unittest.mock import Mock

import pytest
from fakeredis import FakeRedis

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from context import build_context
from models.settings import StoreSettings
from repositories.kv_store import InMemoryKeyValueStore, RedisKeyValueStore
from storefront import build_storefront

FIXED_NOW = datetime(2026, 10, 18, 10, 30, 0)


class RecordingNotify:
    """Host notification callback that records (severity, message) pairs."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    def __call__(self, severity: str, message: str) -> None:
        self.calls.append((severity, message))

    def of(self, severity: str) -> list[str]:
        return [message for recorded, message in self.calls if recorded == severity]

    def clear(self) -> None:
        self.calls.clear()


# ============================================================================
# Catalog / Settings Fixtures
# ============================================================================

@pytest.fixture
def products():
    """P1 and P2 are stock-bounded, P3 is unbounded."""
    return [
        {"id": "P1", "title": "Green Tea", "price": 100, "stock": 3, "category": "Beverages"},
        {"id": "P2", "title": "Masala Chai", "price": 250, "stock": 2, "category": "Beverages"},
        {"id": "P3", "title": "Ceramic Mug", "price": 600, "category": "Kitchen"},
        {"id": "P4", "title": "Sold Out Kettle", "price": 900, "stock": 0},
    ]


@pytest.fixture
def settings():
    return StoreSettings(quantity_debounce_ms=0)


# ============================================================================
# Host Collaborator Fixtures
# ============================================================================

@pytest.fixture
def notify():
    return RecordingNotify()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def redis_store():
    """Redis-backed store on fakeredis (no real Redis server needed)."""
    client = FakeRedis(decode_responses=True)
    yield RedisKeyValueStore(client)
    client.flushall()


@pytest.fixture
def make_storefront(products, settings, store, notify):
    """
    Factory for isolated storefronts sharing this test's store and notify recorder.

    Keyword arguments override settings, store or host callbacks:
        make_storefront(confirm=Mock(return_value=True))
    """
    def _make(**overrides):
        host_callbacks = {"clock": lambda: FIXED_NOW}
        host_callbacks.update(overrides)
        loop = host_callbacks.pop("loop", None)
        context = build_context(
            products=host_callbacks.pop("products", products),
            settings=host_callbacks.pop("settings", settings),
            store=host_callbacks.pop("store", store),
            notify=notify,
            **host_callbacks
        )
        return build_storefront(context, loop)

    return _make


@pytest.fixture
def confirm_yes():
    return Mock(return_value=True)


@pytest.fixture
def confirm_no():
    return Mock(return_value=False)
