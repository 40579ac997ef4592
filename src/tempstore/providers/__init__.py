"""
Provider package.

Backends a TempStore can sit on:
- JSONProvider (json_provider.py): in-memory database mirrored to a JSON file
- MemoryProvider (memory.py): dict-backed, no persistence
"""

from tempstore.providers.base import DataProvider
from tempstore.providers.json_provider import JSONProvider
from tempstore.providers.memory import MemoryProvider

__all__ = [
    "DataProvider",
    "JSONProvider",
    "MemoryProvider",
]
