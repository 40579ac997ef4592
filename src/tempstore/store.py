"""
TempStore: key-value façade with lazy expiration.

Expiration is checked on get() only. A key whose deadline has passed keeps
showing up in keys(), values() and entries() until a get() for it removes
it. There is no background sweep.
"""

from __future__ import annotations

from typing import Callable

from tempstore.logging import get_logger
from tempstore.providers.base import DataProvider
from tempstore.types import SetOption, StoreValue
from tempstore.utils.dates import epoch_ms

logger = get_logger(__name__)


class TempStore:
    """Key-value store over any DataProvider.

    Example:
        provider = await JSONProvider.create("cache.json")
        store = TempStore(provider)
        await store.set("token", "abc", SetOption.expires_in(60))
        await store.get("token")  # "abc" for the next minute, then None
    """

    def __init__(self, provider: DataProvider, clock: Callable[[], int] = epoch_ms) -> None:
        """Initialize the store.

        Args:
            provider: Backend holding the entries.
            clock: Returns the current time in epoch milliseconds; compared
                against expire deadlines at read time.
        """
        self.provider = provider
        self._clock = clock

    async def set(self, key: str, value: StoreValue, option: SetOption | None = None) -> None:
        """Store a value. ``option.expire`` is an absolute epoch-ms deadline."""
        await self.provider.set(key, value, option)

    async def get(self, key: str) -> StoreValue:
        """Get a value, or None if absent or expired.

        An expired entry is deleted from the provider before returning.
        """
        result = await self.provider.get(key)
        if result is None:
            return None

        option = result.option
        if option is not None and option.expire and option.expire <= self._clock():
            await self.provider.delete(key)
            logger.debug("Expired entry removed", key=key, expire=option.expire)
            return None

        return result.value

    async def delete(self, key: str) -> None:
        """Delete a key."""
        await self.provider.delete(key)

    async def keys(self) -> list[str]:
        """List keys, including expired ones not yet read."""
        return await self.provider.keys()

    async def values(self) -> list[StoreValue]:
        """List values, including expired ones not yet read."""
        return await self.provider.values()

    async def entries(self) -> list[tuple[str, StoreValue]]:
        """List (key, value) pairs, including expired ones not yet read."""
        return await self.provider.entries()
