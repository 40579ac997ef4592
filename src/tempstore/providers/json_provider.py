"""
JSON file provider.

Keeps the whole database in memory as raw tagged entries and mirrors it to
a single JSON file. The file is read once, when the provider is created,
and rewritten in full after every set.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

from tempstore.codec import decode, dump_entry, encode
from tempstore.config import Settings, get_settings
from tempstore.exceptions import ConfigurationError, DatabaseCorruptError
from tempstore.logging import get_logger, log_context
from tempstore.medium import FileMedium
from tempstore.providers.base import DataProvider
from tempstore.types import Decoded, PersistResult, PersistStatus, SetOption, StoreValue

logger = get_logger(__name__)

EMPTY_DATABASE = "{}"


class JSONProvider(DataProvider):
    """Provider backed by one JSON object on disk.

    Construct with ``await JSONProvider.create(path)``. Each instance
    exclusively owns its in-memory database; two instances over the same
    path are not supported (the last flush wins).

    Deletes are applied in memory only and reach the file with the next
    set or an explicit flush().
    """

    def __init__(
        self,
        path: str | Path,
        database: dict[str, Any],
        *,
        medium: FileMedium | None = None,
        recursive: bool = True,
    ) -> None:
        """Wrap an already loaded database.

        Args:
            path: Backing file path.
            database: Raw tagged entries keyed by store key.
            medium: File access used for flushes.
            recursive: Tag container elements (default) or use legacy raw
                containers.
        """
        self._path = Path(path)
        self._database = database
        self.medium = medium or FileMedium()
        self.recursive = recursive
        self.last_persist: PersistResult | None = None

    @property
    def path(self) -> Path:
        """Backing file path."""
        return self._path

    @classmethod
    async def create(
        cls,
        path: str | Path | None = None,
        *,
        medium: FileMedium | None = None,
        recursive: bool | None = None,
        settings: Settings | None = None,
    ) -> JSONProvider:
        """Load a provider from its backing file.

        A missing or unreadable file is reset to an empty object and the
        provider starts empty. A file that is not a JSON object is never
        masked.

        Args:
            path: Backing file. Defaults to DATABASE_PATH from settings.
            medium: File access. Defaults to FileMedium.
            recursive: Encoding mode. Defaults to ENCODING from settings.
            settings: Settings to read defaults from. Defaults to get_settings().

        Returns:
            The loaded provider.

        Raises:
            ConfigurationError: If the path is a directory.
            DatabaseCorruptError: If the file holds anything but a JSON object.
        """
        if path is None or recursive is None:
            settings = settings or get_settings()
            if path is None:
                path = settings.DATABASE_PATH
            if recursive is None:
                recursive = settings.recursive_encoding

        path = Path(path)
        if path.is_dir():
            raise ConfigurationError("Backing file path is a directory", context={"path": str(path)})
        medium = medium or FileMedium()

        with log_context(store=str(path), operation="load"):
            try:
                text = medium.read(path)
            except OSError as e:
                logger.info("Backing file unavailable, starting empty", error=str(e))
                _reset_file(medium, path)
                text = EMPTY_DATABASE

            database = _parse_database(path, text)
            logger.debug("Loaded database", entries=len(database))

        return cls(path, database, medium=medium, recursive=recursive)

    def flush(self) -> PersistResult:
        """Write the whole database to the backing file.

        On a write failure the file is reset to an empty object instead of
        retrying. This drops every previously persisted entry from the file
        while the in-memory database keeps them.

        Returns:
            WRITTEN on success, RESET if the write failed and the reset
            succeeded, FAILED if both failed. Also stored in last_persist.
        """
        text = orjson.dumps(self._database).decode("utf-8")

        with log_context(store=str(self._path), operation="flush"):
            try:
                self.medium.write(self._path, text)
            except OSError as e:
                reset_error = _reset_file(self.medium, self._path)
                status = PersistStatus.RESET if reset_error is None else PersistStatus.FAILED
                result = PersistResult(status=status, error=str(e))
                logger.warning(
                    "Failed to write database",
                    status=status.value,
                    error=str(e),
                    entries=len(self._database),
                )
            else:
                result = PersistResult(status=PersistStatus.WRITTEN)

        self.last_persist = result
        return result

    async def set(self, key: str, value: StoreValue, option: SetOption | None = None) -> None:
        """Encode and store a value, then flush the database."""
        self._database[key] = dump_entry(encode(value, option, recursive=self.recursive))
        self.flush()

    async def get(self, key: str) -> Decoded | None:
        """Get a decoded value and its option, or None if absent."""
        raw = self._database.get(key)
        if raw is None:
            return None
        return decode(raw, recursive=self.recursive)

    async def delete(self, key: str) -> None:
        """Remove a key from memory. Not flushed."""
        self._database.pop(key, None)

    async def keys(self) -> list[str]:
        """List keys with an entry."""
        return [key for key, raw in self._database.items() if raw is not None]

    async def values(self) -> list[StoreValue]:
        """List decoded values."""
        return [
            decode(raw, recursive=self.recursive).value
            for raw in self._database.values()
            if raw is not None
        ]

    async def entries(self) -> list[tuple[str, StoreValue]]:
        """List (key, decoded value) pairs."""
        return [
            (key, decode(raw, recursive=self.recursive).value)
            for key, raw in self._database.items()
            if raw is not None
        ]


def _parse_database(path: Path, text: str) -> dict[str, Any]:
    try:
        database = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise DatabaseCorruptError(
            "Backing file is not valid JSON",
            context={"path": str(path), "error": str(e)},
        ) from e

    if not isinstance(database, dict):
        raise DatabaseCorruptError(
            "Backing file does not hold a JSON object",
            context={"path": str(path), "type": type(database).__name__},
        )
    return database


def _reset_file(medium: FileMedium, path: Path) -> str | None:
    """Overwrite the backing file with an empty object.

    Returns:
        None on success, otherwise the error message.
    """
    try:
        medium.write(path, EMPTY_DATABASE)
    except OSError as e:
        logger.error("Failed to reset backing file", path=str(path), error=str(e))
        return str(e)
    return None
