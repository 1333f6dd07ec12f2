from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from pydantic import BaseModel

from ..mock_data import MOCK_ADMIN_USERS, MOCK_SIGNAL_PROVIDERS, MOCK_SIGNALS, MOCK_USERS
from ..schemas import AdminUser, Signal, SignalProvider, User

M = TypeVar("M", bound=BaseModel)


class InMemoryRepository(Generic[M]):
    """
    Ordered, process-local collection of records keyed by their `id`.

    Records are pydantic models and are copied on the way in and out, so
    callers never hold a reference into the collection.
    """

    def __init__(self, items: Iterable[M] = ()) -> None:
        self._items: list[M] = [item.model_copy(deep=True) for item in items]
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _index_of(self, item_id: str) -> int:
        for i, item in enumerate(self._items):
            if getattr(item, "id") == item_id:
                return i
        return -1

    def get(self, item_id: str) -> Optional[M]:
        with self._lock:
            idx = self._index_of(item_id)
            return self._items[idx].model_copy(deep=True) if idx != -1 else None

    def find(self, predicate: Callable[[M], bool]) -> Optional[M]:
        with self._lock:
            for item in self._items:
                if predicate(item):
                    return item.model_copy(deep=True)
        return None

    def list(self, offset: int = 0, limit: Optional[int] = None) -> list[M]:
        with self._lock:
            end = None if limit is None else offset + limit
            return [item.model_copy(deep=True) for item in self._items[offset:end]]

    def insert(self, item: M, *, at_front: bool = False) -> M:
        with self._lock:
            stored = item.model_copy(deep=True)
            if at_front:
                self._items.insert(0, stored)
            else:
                self._items.append(stored)
            return stored.model_copy(deep=True)

    def update(self, item_id: str, **changes: Any) -> Optional[M]:
        """Apply `changes` to the record; returns None if the id is unknown."""
        with self._lock:
            idx = self._index_of(item_id)
            if idx == -1:
                return None
            updated = self._items[idx].model_copy(update=changes)
            self._items[idx] = updated
            return updated.model_copy(deep=True)

    def delete(self, item_id: str) -> bool:
        with self._lock:
            idx = self._index_of(item_id)
            if idx == -1:
                return False
            del self._items[idx]
            return True


@dataclass
class MockStore:
    """All in-memory collections used by the mock mode."""

    users: InMemoryRepository[User]
    admin_users: InMemoryRepository[AdminUser]
    signals: InMemoryRepository[Signal]
    providers: InMemoryRepository[SignalProvider]
    # user id -> followed provider ids
    follows: dict[str, set[str]] = field(default_factory=dict)
    follows_lock: threading.Lock = field(default_factory=threading.Lock)

    def toggle_follow(self, user_id: str, provider_id: str) -> bool:
        """Flip the follow flag; returns the new state."""
        with self.follows_lock:
            followed = self.follows.setdefault(user_id, set())
            if provider_id in followed:
                followed.remove(provider_id)
                return False
            followed.add(provider_id)
            return True


def build_mock_store(
    users: Iterable[User] = MOCK_USERS,
    admin_users: Iterable[AdminUser] = MOCK_ADMIN_USERS,
    signals: Iterable[Signal] = MOCK_SIGNALS,
    providers: Iterable[SignalProvider] = MOCK_SIGNAL_PROVIDERS,
) -> MockStore:
    return MockStore(
        users=InMemoryRepository(users),
        admin_users=InMemoryRepository(admin_users),
        signals=InMemoryRepository(signals),
        providers=InMemoryRepository(providers),
    )
