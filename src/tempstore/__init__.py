"""
tempstore: a typed key-value store with pluggable providers and lazy expiration.

Values (None, bool, numbers, str, datetime, bytes and nested lists/dicts of
these) are encoded into tagged JSON entries by tempstore.codec, kept by a
provider, and read back through TempStore, which drops expired entries on
get().
"""

from tempstore.codec import (
    BufferEntry,
    DateEntry,
    EncodedValue,
    PrimitiveEntry,
    UnknownEntry,
    decode,
    encode,
    parse_entry,
)
from tempstore.config import Settings, clear_settings_cache, get_settings
from tempstore.exceptions import (
    ConfigurationError,
    DatabaseCorruptError,
    StoreError,
    ValueEncodingError,
)
from tempstore.medium import FileMedium
from tempstore.providers import DataProvider, JSONProvider, MemoryProvider
from tempstore.store import TempStore
from tempstore.types import (
    Decoded,
    EntryType,
    PersistResult,
    PersistStatus,
    SetOption,
    StoreValue,
)
from tempstore.utils.dates import INVALID_DATE, InvalidDate

__all__ = [
    "BufferEntry",
    "ConfigurationError",
    "DataProvider",
    "DatabaseCorruptError",
    "DateEntry",
    "Decoded",
    "EncodedValue",
    "EntryType",
    "FileMedium",
    "INVALID_DATE",
    "InvalidDate",
    "JSONProvider",
    "MemoryProvider",
    "PersistResult",
    "PersistStatus",
    "PrimitiveEntry",
    "SetOption",
    "Settings",
    "StoreError",
    "StoreValue",
    "TempStore",
    "UnknownEntry",
    "ValueEncodingError",
    "clear_settings_cache",
    "decode",
    "encode",
    "get_settings",
    "parse_entry",
]
