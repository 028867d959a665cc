"""
Guest/authenticated strategies

Every store operation exists in two flavours: a local one (guest mode, state
kept in the Persistent Store) and a remote one (authenticated mode, the server
snapshot is authoritative). The store picks the strategy from its current mode
so the operations themselves never branch on authentication.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Protocol, TypeVar

from cartsync.collection.models import ProductSnapshot, Snapshot
from cartsync.collection.persistence import GuestPersistence

T = TypeVar("T")


class RemoteCollection(Protocol[T]):
    """Remote Gateway Adapter as seen by the stores."""

    async def fetch_all(self) -> Snapshot[T]: ...

    async def add(self, product_id: str) -> Snapshot[T]: ...

    async def remove(self, product_id: str) -> Snapshot[T]: ...

    async def clear(self) -> Snapshot[T]: ...


class CollectionStrategy(ABC, Generic[T]):
    """
    One operating mode.

    Mutations return the snapshot to install, or None when nothing changes.
    `commit` runs after the snapshot is installed in memory.
    """

    @abstractmethod
    async def load(self) -> Snapshot[T]:
        ...

    @abstractmethod
    async def add(self, items: List[T], product: ProductSnapshot, quantity: int) -> Optional[Snapshot[T]]:
        ...

    @abstractmethod
    async def remove(self, items: List[T], product_id: str) -> Optional[Snapshot[T]]:
        ...

    @abstractmethod
    async def clear(self, items: List[T]) -> Snapshot[T]:
        ...

    async def commit(self, items: List[T]) -> None:
        return None


class LocalStrategy(CollectionStrategy[T]):
    """Guest mode: mutate the list in memory, then persist it."""

    def __init__(self, persistence: GuestPersistence[T]):
        self.persistence = persistence

    async def load(self) -> Snapshot[T]:
        return Snapshot(items=await self.persistence.load())

    async def remove(self, items: List[T], product_id: str) -> Optional[Snapshot[T]]:
        remaining = [item for item in items if item.product_id != product_id]
        if len(remaining) == len(items):
            return None
        return Snapshot(items=remaining)

    async def clear(self, items: List[T]) -> Snapshot[T]:
        return Snapshot(items=[])

    async def commit(self, items: List[T]) -> None:
        # An empty guest collection has no record at all
        if items:
            await self.persistence.save(items)
        else:
            await self.persistence.clear()


class RemoteStrategy(CollectionStrategy[T]):
    """Authenticated mode: every call returns the server's full snapshot."""

    def __init__(self, remote: RemoteCollection[T]):
        self.remote = remote

    async def load(self) -> Snapshot[T]:
        return await self.remote.fetch_all()

    async def add(self, items: List[T], product: ProductSnapshot, quantity: int) -> Optional[Snapshot[T]]:
        # The server adds exactly one unit whatever quantity was asked for
        return await self.remote.add(product.id)

    async def remove(self, items: List[T], product_id: str) -> Optional[Snapshot[T]]:
        return await self.remote.remove(product_id)

    async def clear(self, items: List[T]) -> Snapshot[T]:
        return await self.remote.clear()
