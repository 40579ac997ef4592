"""Utility modules for tempstore."""

from tempstore.utils.dates import (
    INVALID_DATE,
    InvalidDate,
    epoch_ms,
    parse_iso,
    to_iso_millis,
)

__all__ = [
    "INVALID_DATE",
    "InvalidDate",
    "epoch_ms",
    "parse_iso",
    "to_iso_millis",
]
