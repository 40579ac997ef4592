"""
Core types for tempstore.

This module defines:
- EntryType: the tag carried by every stored entry
- SetOption: per-entry options (absolute expiration deadline)
- Decoded: a decoded value together with its option
- PersistStatus / PersistResult: outcome of writing the database to disk
- StoreValue: the runtime value types a store accepts
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Union

from tempstore.utils.dates import InvalidDate, epoch_ms

StoreValue = Union[
    None,
    bool,
    int,
    float,
    str,
    datetime,
    InvalidDate,
    bytes,
    list["StoreValue"],
    dict[str, "StoreValue"],
]


class EntryType(str, Enum):
    """Tag of a stored entry."""

    PRIMITIVE = "primitive"
    DATE = "date"
    BUFFER = "buffer"


@dataclass(frozen=True)
class SetOption:
    """Options attached to an entry when it is set.

    ``expire`` is an absolute deadline in epoch milliseconds, not a duration.
    """

    expire: int | float | None = None

    @classmethod
    def expires_in(cls, seconds: float, now_ms: int | None = None) -> SetOption:
        """Build an option whose deadline is ``seconds`` from now."""
        base = epoch_ms() if now_ms is None else now_ms
        return cls(expire=base + int(seconds * 1000))

    def to_json(self) -> dict[str, Any]:
        """Convert to the on-disk option object, omitting unset fields."""
        if self.expire is None:
            return {}
        return {"expire": self.expire}

    @classmethod
    def from_json(cls, raw: Any) -> SetOption | None:
        """Read an on-disk option object.

        Returns None when the entry carries no option object at all. Fields
        with the wrong type are ignored rather than rejected.
        """
        if not isinstance(raw, Mapping):
            return None
        expire = raw.get("expire")
        if isinstance(expire, bool) or not isinstance(expire, (int, float)):
            expire = None
        return cls(expire=expire)


@dataclass(frozen=True)
class Decoded:
    """A value read back from a provider, with the option it was stored with."""

    value: StoreValue
    option: SetOption | None = None


class PersistStatus(str, Enum):
    """How a flush of the database to its backing file ended."""

    WRITTEN = "written"  # Full database written
    RESET = "reset"  # Write failed, file reset to an empty object
    FAILED = "failed"  # Write failed and the reset failed too


@dataclass(frozen=True)
class PersistResult:
    """Outcome of a database flush.

    A RESET result means every entry previously persisted in the file was
    discarded; the in-memory database is unaffected.
    """

    status: PersistStatus
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True if the database was written as-is."""
        return self.status == PersistStatus.WRITTEN
