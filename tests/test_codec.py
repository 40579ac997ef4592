"""
Tests for the value codec.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tempstore.codec import (
    BufferEntry,
    DateEntry,
    PrimitiveEntry,
    UnknownEntry,
    decode,
    encode,
    parse_entry,
)
from tempstore.exceptions import ValueEncodingError
from tempstore.types import Decoded, SetOption
from tempstore.utils.dates import INVALID_DATE

NEW_YEAR = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestEncode:
    """Tests for encode()."""

    def test_date_is_tagged_with_iso_string(self) -> None:
        """Test that datetimes become date entries in UTC with milliseconds."""
        entry = encode(NEW_YEAR)

        assert isinstance(entry, DateEntry)
        assert entry.to_json() == {"type": "date", "date": "2024-01-01T00:00:00.000Z"}

    def test_date_with_offset_is_converted_to_utc(self) -> None:
        """Test that aware datetimes are normalized to UTC."""
        value = datetime(2024, 1, 1, 2, 30, tzinfo=timezone(timedelta(hours=2)))

        assert encode(value).date == "2024-01-01T00:30:00.000Z"

    def test_naive_date_is_taken_as_utc(self) -> None:
        """Test that naive datetimes are stored as if they were UTC."""
        assert encode(datetime(2024, 1, 1, 12)).date == "2024-01-01T12:00:00.000Z"

    def test_sub_millisecond_precision_is_truncated(self) -> None:
        """Test that microseconds below the millisecond are dropped."""
        value = NEW_YEAR.replace(microsecond=123_999)

        assert encode(value).date == "2024-01-01T00:00:00.123Z"

    def test_bytes_are_base64(self) -> None:
        """Test that binary values become buffer entries."""
        entry = encode(bytes([0, 1, 2, 3]))

        assert isinstance(entry, BufferEntry)
        assert entry.to_json() == {"type": "buffer", "buf": "AAECAw=="}

    def test_bytearray_and_memoryview_are_binary(self) -> None:
        """Test that all bytes-like types encode as buffers."""
        assert encode(bytearray(b"hi")).buf == "aGk="
        assert encode(memoryview(b"hi")).buf == "aGk="

    def test_scalar_is_primitive(self) -> None:
        """Test that scalars are stored untouched."""
        assert encode("hello").to_json() == {"type": "primitive", "value": "hello"}
        assert encode(None).to_json() == {"type": "primitive", "value": None}

    def test_containers_are_tagged_recursively(self) -> None:
        """Test that list and dict elements become nested entries."""
        entry = encode({"x": 1, "y": ["a", NEW_YEAR]})

        assert isinstance(entry, PrimitiveEntry)
        assert entry.to_json() == {
            "type": "primitive",
            "value": {
                "x": {"type": "primitive", "value": 1},
                "y": {
                    "type": "primitive",
                    "value": [
                        {"type": "primitive", "value": "a"},
                        {"type": "date", "date": "2024-01-01T00:00:00.000Z"},
                    ],
                },
            },
        }

    def test_option_is_kept_on_every_variant(self) -> None:
        """Test that the top-level option is attached to every entry kind."""
        option = SetOption(expire=1000)

        for value in ("s", [1], {"k": 1}, NEW_YEAR, b"\x00"):
            assert encode(value, option).to_json()["option"] == {"expire": 1000}

    def test_nested_elements_carry_no_option(self) -> None:
        """Test that only the outermost entry carries the option."""
        raw = encode([1], SetOption(expire=5)).to_json()

        assert "option" not in raw["value"][0]

    def test_empty_option_is_written_as_empty_object(self) -> None:
        """Test that an option without expire is written as {}."""
        assert encode(1, SetOption()).to_json()["option"] == {}

    def test_tuple_encodes_as_list(self) -> None:
        """Test that tuples are treated as sequences."""
        assert decode(encode((1, 2))).value == [1, 2]

    @pytest.mark.parametrize("value", [{1, 2}, object(), 2**70, {1: "a"}])
    def test_unsupported_values_raise(self, value: object) -> None:
        """Test that values with no JSON-safe form are rejected."""
        with pytest.raises(ValueEncodingError):
            encode(value)

    def test_legacy_mode_stores_raw_containers(self) -> None:
        """Test that legacy encoding keeps container elements as raw JSON."""
        entry = encode({"x": [1, 2]}, recursive=False)

        assert entry.to_json() == {"type": "primitive", "value": {"x": [1, 2]}}

    def test_legacy_mode_rejects_nested_dates(self) -> None:
        """Test that legacy encoding cannot nest dates in containers."""
        with pytest.raises(ValueEncodingError) as exc_info:
            encode([NEW_YEAR], recursive=False)

        assert exc_info.value.context["mode"] == "legacy"

    def test_legacy_mode_still_tags_top_level_dates(self) -> None:
        """Test that legacy encoding only differs for containers."""
        assert isinstance(encode(NEW_YEAR, recursive=False), DateEntry)


class TestDecode:
    """Tests for decode()."""

    @pytest.mark.parametrize(
        "value",
        [None, True, False, 0, -7, 1.5, "", "text", [], {}, [1, [2, [3]]], {"a": {"b": None}}],
    )
    def test_primitive_round_trip(self, value: object) -> None:
        """Test that JSON-safe values come back unchanged."""
        assert decode(encode(value)) == Decoded(value=value)

    def test_round_trip_with_option(self) -> None:
        """Test that the option comes back with the value."""
        option = SetOption(expire=1_700_000_000_000)

        assert decode(encode({"k": "v"}, option)) == Decoded(value={"k": "v"}, option=option)

    def test_date_round_trip_is_millisecond_exact(self) -> None:
        """Test that dates come back as equal aware datetimes."""
        value = datetime(2024, 5, 6, 7, 8, 9, 123_000, tzinfo=timezone.utc)

        decoded = decode(encode(value))

        assert decoded.value == value
        assert decoded.value.tzinfo is not None

    def test_early_year_round_trip(self) -> None:
        """Test that years below 1000 are zero-padded and decode back."""
        value = datetime(5, 6, 7, tzinfo=timezone.utc)

        entry = encode(value)

        assert entry.date == "0005-06-07T00:00:00.000Z"
        assert decode(entry).value == value

    def test_bytes_round_trip_is_byte_exact(self) -> None:
        """Test that binary values come back as identical bytes."""
        data = bytes(range(256))

        decoded = decode(encode(bytearray(data)))

        assert decoded.value == data
        assert isinstance(decoded.value, bytes)

    def test_nested_date_and_bytes_round_trip(self) -> None:
        """Test that dates and binary values survive inside containers."""
        value = {"when": [NEW_YEAR], "blob": {"raw": b"\x00\xff"}}

        assert decode(encode(value)).value == value

    def test_decodes_raw_json(self) -> None:
        """Test that raw on-disk entries can be decoded directly."""
        raw = {"type": "buffer", "buf": "AAECAw==", "option": {"expire": 10}}

        assert decode(raw) == Decoded(value=bytes([0, 1, 2, 3]), option=SetOption(expire=10))

    def test_nested_options_are_dropped(self) -> None:
        """Test that options on nested raw elements never surface."""
        raw = {
            "type": "primitive",
            "value": [{"type": "primitive", "value": 1, "option": {"expire": 5}}],
        }

        assert decode(raw) == Decoded(value=[1])

    def test_absent_option_is_not_invented(self) -> None:
        """Test that a missing option decodes to None, not an empty option."""
        assert decode({"type": "primitive", "value": 1}).option is None

    def test_empty_option_decodes_to_option_without_expire(self) -> None:
        """Test that an on-disk {} option is kept as such."""
        assert decode({"type": "primitive", "value": 1, "option": {}}).option == SetOption()

    def test_non_numeric_expire_is_ignored(self) -> None:
        """Test that a malformed expire field does not break decoding."""
        decoded = decode({"type": "primitive", "value": 1, "option": {"expire": "soon"}})

        assert decoded.option == SetOption(expire=None)

    @pytest.mark.parametrize(
        "raw",
        [
            {"value": 1},
            {"type": "blob", "value": 1},
            {"type": "buffer"},
            {"type": "buffer", "buf": 42},
            "just a string",
            42,
            None,
            [],
        ],
    )
    def test_malformed_entry_decodes_to_none(self, raw: object) -> None:
        """Test that foreign or malformed entries never raise."""
        assert decode(raw) == Decoded(value=None, option=None)

    def test_unknown_entry_drops_option(self) -> None:
        """Test that an unknown tag yields no option even if one is stored."""
        assert decode({"type": "nope", "option": {"expire": 1}}).option is None

    def test_invalid_base64_decodes_to_none(self) -> None:
        """Test that undecodable base64 is treated as a malformed entry."""
        assert decode({"type": "buffer", "buf": "abc"}).value is None

    @pytest.mark.parametrize("date", ["not a date", "2024-13-45T00:00:00Z", 12345, None])
    def test_malformed_date_decodes_to_invalid_date(self, date: object) -> None:
        """Test that bad date strings yield the INVALID_DATE sentinel."""
        assert decode({"type": "date", "date": date}).value is INVALID_DATE

    def test_invalid_date_round_trip(self) -> None:
        """Test that the sentinel itself can be stored and read back."""
        entry = encode(INVALID_DATE)

        assert entry.to_json() == {"type": "date", "date": None}
        assert decode(entry).value is INVALID_DATE

    def test_date_only_string_is_utc_midnight(self) -> None:
        """Test that a bare calendar date is read as UTC midnight."""
        assert decode({"type": "date", "date": "2024-01-01"}).value == NEW_YEAR

    def test_legacy_raw_containers_pass_through(self) -> None:
        """Test that legacy entries decode in legacy mode."""
        raw = {"type": "primitive", "value": {"x": 1, "y": ["a", "b"]}}

        assert decode(raw, recursive=False).value == {"x": 1, "y": ["a", "b"]}


class TestParseEntry:
    """Tests for parse_entry()."""

    def test_parses_each_variant(self) -> None:
        """Test that each tag maps to its entry class."""
        assert isinstance(parse_entry({"type": "primitive", "value": 1}), PrimitiveEntry)
        assert isinstance(parse_entry({"type": "date", "date": "x"}), DateEntry)
        assert isinstance(parse_entry({"type": "buffer", "buf": ""}), BufferEntry)
        assert isinstance(parse_entry({"type": "other"}), UnknownEntry)

    def test_entries_pass_through(self) -> None:
        """Test that already parsed entries are returned as-is."""
        entry = encode(1)

        assert parse_entry(entry) is entry

    def test_recursive_parse_tags_elements(self) -> None:
        """Test that container elements are parsed as entries in tagged mode."""
        entry = parse_entry({"type": "primitive", "value": [{"type": "primitive", "value": 1}]})

        assert entry.value == [PrimitiveEntry(value=1)]

    def test_parsed_entry_serializes_back_to_raw(self) -> None:
        """Test that parsing then serializing preserves the raw form."""
        raw = encode({"a": [NEW_YEAR, b"x"]}, SetOption(expire=9)).to_json()

        assert parse_entry(raw).to_json() == raw
