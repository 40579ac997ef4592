"""
Base class for data providers.

A provider owns the persisted entries behind a TempStore. It encodes
values on the way in and decodes them on the way out, and returns each
value together with the SetOption it was stored with so the store can
apply expiration. Providers never apply expiration themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from tempstore.types import Decoded, SetOption, StoreValue


class DataProvider(ABC):
    """Abstract interface for store backends."""

    @abstractmethod
    async def set(self, key: str, value: StoreValue, option: SetOption | None = None) -> None:
        """Store a value, overwriting any previous entry for the key."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Decoded | None:
        """Get a value and its option, or None if there is no entry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry for a key, if any."""
        ...

    @abstractmethod
    async def keys(self) -> list[str]:
        """List all keys with an entry."""
        ...

    @abstractmethod
    async def values(self) -> list[StoreValue]:
        """List all decoded values, without options."""
        ...

    @abstractmethod
    async def entries(self) -> list[tuple[str, StoreValue]]:
        """List all (key, decoded value) pairs, without options."""
        ...
