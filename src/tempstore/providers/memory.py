"""
In-memory provider.

Holds encoded entries in a dict with no backing file. Values still go
through the codec, so what comes back matches the JSON provider exactly.
Useful for tests and for stores that need not outlive the process.
"""

from __future__ import annotations

from tempstore.codec import EncodedValue, decode, dump_entry, encode
from tempstore.providers.base import DataProvider
from tempstore.types import Decoded, SetOption, StoreValue


class MemoryProvider(DataProvider):
    """Dict-backed provider."""

    def __init__(self, *, recursive: bool = True) -> None:
        self.recursive = recursive
        self._entries: dict[str, EncodedValue] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def set(self, key: str, value: StoreValue, option: SetOption | None = None) -> None:
        entry = encode(value, option, recursive=self.recursive)
        # Same JSON limits as the file provider
        dump_entry(entry)
        self._entries[key] = entry

    async def get(self, key: str) -> Decoded | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return decode(entry)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._entries)

    async def values(self) -> list[StoreValue]:
        return [decode(entry).value for entry in self._entries.values()]

    async def entries(self) -> list[tuple[str, StoreValue]]:
        return [(key, decode(entry).value) for key, entry in self._entries.items()]
