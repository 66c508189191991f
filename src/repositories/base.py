"""Store ABC and the in-memory, lock-guarded implementation.

Repositories sit on top of an ``EntityStore``; swapping the in-memory
store for a database-backed one leaves repositories and services untouched.

The in-memory store deep-copies entities on the way in and out, so a caller
holding a returned entity can never mutate stored state behind the store's
back. All operations take the store's ``asyncio.Lock``; ``update`` runs a
whole read-modify-write under it.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class EntityStore(ABC, Generic[T]):
    """Keyed entity storage contract."""

    @abstractmethod
    async def get(self, entity_id: str) -> T | None: ...

    @abstractmethod
    async def list_all(self) -> list[T]: ...

    @abstractmethod
    async def save(self, entity: T) -> T: ...

    @abstractmethod
    async def delete(self, entity_id: str) -> bool: ...

    @abstractmethod
    async def update(self, entity_id: str, mutate: Callable[[T], T]) -> T | None:
        """Apply ``mutate`` to the stored entity atomically.

        Returns the saved result, or ``None`` when no entity has that id.
        Exceptions raised by ``mutate`` leave the stored entity unchanged.
        """
        ...

    @abstractmethod
    async def count(self) -> int: ...


class InMemoryEntityStore(EntityStore[T]):
    """Insertion-ordered in-memory store.

    Production deployments replace it with a database-backed store.
    """

    def __init__(self, id_field: str = "id", items: Iterable[T] = ()) -> None:
        self._id_field = id_field
        self._items: dict[str, T] = {}
        self._lock = asyncio.Lock()
        for item in items:
            self._items[self._key(item)] = item.model_copy(deep=True)

    def _key(self, entity: T) -> str:
        return getattr(entity, self._id_field)

    async def get(self, entity_id: str) -> T | None:
        async with self._lock:
            entity = self._items.get(entity_id)
            return entity.model_copy(deep=True) if entity is not None else None

    async def list_all(self) -> list[T]:
        async with self._lock:
            return [e.model_copy(deep=True) for e in self._items.values()]

    async def save(self, entity: T) -> T:
        async with self._lock:
            self._items[self._key(entity)] = entity.model_copy(deep=True)
            return entity.model_copy(deep=True)

    async def delete(self, entity_id: str) -> bool:
        async with self._lock:
            return self._items.pop(entity_id, None) is not None

    async def update(self, entity_id: str, mutate: Callable[[T], T]) -> T | None:
        async with self._lock:
            current = self._items.get(entity_id)
            if current is None:
                return None
            updated = mutate(current.model_copy(deep=True))
            self._items[entity_id] = updated.model_copy(deep=True)
            return updated.model_copy(deep=True)

    async def count(self) -> int:
        async with self._lock:
            return len(self._items)
