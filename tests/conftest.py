"""Pytest configuration and shared fixtures."""

import asyncio
from typing import Optional, Sequence

import pytest

from cozy_app.errors import StoreError
from cozy_app.persistence.kv_store import InMemoryKeyValueStore
from cozy_app.state.controller import PhaseController
from cozy_app.state.models import Profile


class FlakyStore(InMemoryKeyValueStore):
    """In-memory store that fails chosen operations for chosen keys."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_get: set[str] = set()
        self.fail_set: set[str] = set()
        self.fail_remove: set[str] = set()
        self.calls: list[tuple] = []

    def heal(self) -> None:
        self.fail_get.clear()
        self.fail_set.clear()
        self.fail_remove.clear()

    async def get(self, key: str) -> Optional[str]:
        self.calls.append(("get", key))
        if key in self.fail_get:
            raise StoreError(f"get failed for {key}", operation="get", target=key, failed_keys=[key])
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        self.calls.append(("set", key, value))
        if key in self.fail_set:
            raise StoreError(f"set failed for {key}", operation="set", target=key, failed_keys=[key])
        await super().set(key, value)

    async def remove(self, key: str) -> None:
        self.calls.append(("remove", key))
        if key in self.fail_remove:
            raise StoreError(f"remove failed for {key}", operation="remove", target=key, failed_keys=[key])
        await super().remove(key)

    async def remove_many(self, keys: Sequence[str]) -> None:
        self.calls.append(("remove_many", tuple(keys)))
        failed = [key for key in keys if key in self.fail_remove]
        for key in keys:
            if key not in failed:
                self.data.pop(key, None)
        if failed:
            raise StoreError(
                f"remove_many failed for {', '.join(failed)}",
                operation="remove_many",
                target=",".join(keys),
                failed_keys=failed
            )


@pytest.fixture
def store() -> FlakyStore:
    """Empty fault-injecting store (first run)."""
    return FlakyStore()


@pytest.fixture
def controller(store: FlakyStore) -> PhaseController:
    """Unresolved controller over the shared store."""
    return PhaseController(store)


@pytest.fixture
def cold_start(store: FlakyStore):
    """Simulate an app restart: a fresh controller resolved from the same store."""
    def _cold_start() -> PhaseController:
        fresh = PhaseController(store)
        asyncio.run(fresh.resolve_startup_phase())
        return fresh
    return _cold_start


@pytest.fixture
def sample_profile() -> Profile:
    """Profile as produced by an email signup."""
    return Profile(
        email="a@b.com",
        signup_method="email",
        join_date="2024-03-01T09:30:00.000Z",
        user_id="1709285400000",
    )
