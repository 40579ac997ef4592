"""
Value codec: runtime values <-> tagged JSON-safe entries.

Every stored value becomes one of three tagged entries:

    {"type": "primitive", "value": <json>,       "option"?: {"expire"?: <ms>}}
    {"type": "date",      "date": "<ISO-8601>", "option"?: {...}}
    {"type": "buffer",    "buf": "<base64>",     "option"?: {...}}

In the default tagged mode the elements of lists and dicts inside a
primitive entry are themselves tagged entries, so dates and binary values
can be nested at any depth. Legacy mode keeps containers as raw JSON and
therefore cannot hold nested dates or binary values.

Anything that does not parse as one of the three entries becomes an
UnknownEntry, which decodes to None. Neither parsing nor decoding raises.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Mapping, Union

import orjson

from tempstore.exceptions import ValueEncodingError
from tempstore.types import Decoded, EntryType, SetOption
from tempstore.utils.dates import InvalidDate, parse_iso, to_iso_millis

_SCALARS = (type(None), bool, int, float, str)
_BINARY = (bytes, bytearray, memoryview)

# Range orjson can serialize
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1


def _with_option(body: dict[str, Any], option: SetOption | None) -> dict[str, Any]:
    if option is not None:
        body["option"] = option.to_json()
    return body


@dataclass(frozen=True)
class PrimitiveEntry:
    """A scalar, list or dict. Container elements may be nested entries."""

    value: Any
    option: SetOption | None = None

    type: ClassVar[EntryType] = EntryType.PRIMITIVE

    def to_json(self) -> dict[str, Any]:
        return _with_option({"type": self.type.value, "value": _value_to_json(self.value)}, self.option)


@dataclass(frozen=True)
class DateEntry:
    """An instant stored as an ISO-8601 string (None for an invalid date)."""

    date: str | None
    option: SetOption | None = None

    type: ClassVar[EntryType] = EntryType.DATE

    def to_json(self) -> dict[str, Any]:
        return _with_option({"type": self.type.value, "date": self.date}, self.option)


@dataclass(frozen=True)
class BufferEntry:
    """Raw bytes stored as a standard base64 string."""

    buf: str
    option: SetOption | None = None

    type: ClassVar[EntryType] = EntryType.BUFFER

    def to_json(self) -> dict[str, Any]:
        return _with_option({"type": self.type.value, "buf": self.buf}, self.option)


@dataclass(frozen=True)
class UnknownEntry:
    """Fallback for tag-less, foreign or malformed raw entries."""

    raw: Any = field(default=None, compare=False)

    option: ClassVar[None] = None


EncodedValue = Union[PrimitiveEntry, DateEntry, BufferEntry, UnknownEntry]

_ENTRY_CLASSES = (PrimitiveEntry, DateEntry, BufferEntry, UnknownEntry)


def _value_to_json(value: Any) -> Any:
    if isinstance(value, list):
        return [_value_to_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _value_to_json(item) for key, item in value.items()}
    if isinstance(value, (PrimitiveEntry, DateEntry, BufferEntry)):
        return value.to_json()
    return value


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode(value: Any, option: SetOption | None = None, *, recursive: bool = True) -> EncodedValue:
    """Encode a runtime value into a tagged entry.

    Args:
        value: None, bool, int, float, str, datetime, bytes-like, or a
            list/tuple/dict of those.
        option: Option to attach to the top-level entry.
        recursive: Tag container elements (default) or store containers as
            raw JSON (legacy mode).

    Returns:
        The tagged entry.

    Raises:
        ValueEncodingError: If the value (or a nested element) has an
            unsupported type, or a dict has non-string keys.
    """
    if isinstance(value, InvalidDate):
        return DateEntry(date=None, option=option)
    if isinstance(value, datetime):
        return DateEntry(date=to_iso_millis(value), option=option)
    if isinstance(value, _BINARY):
        return BufferEntry(buf=base64.b64encode(bytes(value)).decode("ascii"), option=option)
    if recursive:
        return PrimitiveEntry(value=_encode_tagged(value), option=option)
    return PrimitiveEntry(value=_encode_raw(value), option=option)


def _encode_tagged(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return _check_scalar(value, "tagged")
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, Mapping):
        return {_check_key(key, "tagged"): encode(item) for key, item in value.items()}
    raise ValueEncodingError(
        "Unsupported value type",
        context={"type": type(value).__name__, "mode": "tagged"},
    )


def _encode_raw(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return _check_scalar(value, "legacy")
    if isinstance(value, (list, tuple)):
        return [_encode_raw(item) for item in value]
    if isinstance(value, Mapping):
        return {_check_key(key, "legacy"): _encode_raw(item) for key, item in value.items()}
    if isinstance(value, (datetime, InvalidDate) + _BINARY):
        raise ValueEncodingError(
            "Legacy encoding cannot nest dates or binary values in containers",
            context={"type": type(value).__name__, "mode": "legacy"},
        )
    raise ValueEncodingError(
        "Unsupported value type",
        context={"type": type(value).__name__, "mode": "legacy"},
    )


def _check_scalar(value: Any, mode: str) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        if not _INT_MIN <= value <= _INT_MAX:
            raise ValueEncodingError(
                "Integer out of 64-bit range",
                context={"type": "int", "mode": mode},
            )
    return value


def _check_key(key: Any, mode: str) -> str:
    if not isinstance(key, str):
        raise ValueEncodingError(
            "Mapping keys must be strings",
            context={"type": type(key).__name__, "mode": mode},
        )
    return key


def dump_entry(entry: PrimitiveEntry | DateEntry | BufferEntry) -> dict[str, Any]:
    """Return the raw JSON form of an entry, checked to serialize.

    Catches what orjson rejects beyond type checks, such as strings with
    lone surrogates or nesting past orjson's depth limit.

    Raises:
        ValueEncodingError: If orjson cannot serialize the entry.
    """
    raw = entry.to_json()
    try:
        orjson.dumps(raw)
    except orjson.JSONEncodeError as e:
        raise ValueEncodingError(
            "Value cannot be serialized to JSON",
            context={"type": entry.type.value, "error": str(e)},
        ) from e
    return raw


# ---------------------------------------------------------------------------
# Parsing raw JSON
# ---------------------------------------------------------------------------


def parse_entry(raw: Any, *, recursive: bool = True) -> EncodedValue:
    """Convert a raw JSON entry (as read from disk) to a tagged entry.

    Args:
        raw: The raw JSON value stored under a key.
        recursive: Whether container elements of primitive entries are
            tagged entries (default) or raw JSON (legacy mode).

    Returns:
        The matching entry class, or UnknownEntry for anything malformed.
    """
    if isinstance(raw, _ENTRY_CLASSES):
        return raw
    if not isinstance(raw, Mapping):
        return UnknownEntry(raw)

    tag = raw.get("type")
    option = SetOption.from_json(raw.get("option"))

    if tag == EntryType.PRIMITIVE.value:
        value = raw.get("value")
        if recursive and isinstance(value, list):
            value = [parse_entry(item) for item in value]
        elif recursive and isinstance(value, Mapping):
            value = {key: parse_entry(item) for key, item in value.items()}
        return PrimitiveEntry(value=value, option=option)

    if tag == EntryType.DATE.value:
        date = raw.get("date")
        return DateEntry(date=date if isinstance(date, str) else None, option=option)

    if tag == EntryType.BUFFER.value:
        buf = raw.get("buf")
        if not isinstance(buf, str):
            return UnknownEntry(raw)
        return BufferEntry(buf=buf, option=option)

    return UnknownEntry(raw)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode(entry: EncodedValue | Any, *, recursive: bool = True) -> Decoded:
    """Decode a tagged entry (or raw JSON entry) back to a runtime value.

    Only the top-level option is returned; options on nested elements are
    dropped. Unknown or malformed entries decode to ``Decoded(None)`` and a
    malformed date string decodes to INVALID_DATE.

    Args:
        entry: An entry from encode()/parse_entry(), or raw JSON.
        recursive: Encoding mode used when ``entry`` is raw JSON.

    Returns:
        The decoded value and its option.
    """
    entry = parse_entry(entry, recursive=recursive)

    if isinstance(entry, PrimitiveEntry):
        return Decoded(value=_decode_primitive(entry.value), option=entry.option)

    if isinstance(entry, DateEntry):
        return Decoded(value=parse_iso(entry.date), option=entry.option)

    if isinstance(entry, BufferEntry):
        try:
            data = base64.b64decode(entry.buf)
        except (binascii.Error, ValueError):
            return Decoded(value=None)
        return Decoded(value=data, option=entry.option)

    # UnknownEntry
    return Decoded(value=None)


def _decode_primitive(value: Any) -> Any:
    if isinstance(value, list):
        return [_decode_element(item) for item in value]
    if isinstance(value, dict):
        return {key: _decode_element(item) for key, item in value.items()}
    return value


def _decode_element(item: Any) -> Any:
    # Legacy containers hold raw JSON, which is already the runtime value
    if isinstance(item, _ENTRY_CLASSES):
        return decode(item).value
    return item
