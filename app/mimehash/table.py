"""Bidirectional MIME identifier <-> digest table."""

from __future__ import annotations

import binascii
import logging

import aiorwlock

from .catalog import Category
from .rows import DIGEST_SIZE, RegistryRow, compute_digest, normalize, parse_rows

logger = logging.getLogger(__name__)


class TranslationTable:
    """Two mutually consistent mappings: identifier -> digest and back.

    Not synchronized; share it through :class:`SharedTable`.
    """

    def __init__(self) -> None:
        self._mime_to_hash: dict[str, bytes] = {}
        self._hash_to_mime: dict[bytes, str] = {}

    def __len__(self) -> int:
        return len(self._mime_to_hash)

    def insert(self, category: Category, row: RegistryRow) -> str | None:
        """Normalize *row* and store it under both keys.

        Returns the stored identifier, or ``None`` when the row is skipped.
        """
        identifier = normalize(category, row)
        if identifier is None:
            return None
        digest = compute_digest(identifier)
        self._hash_to_mime[digest] = identifier
        self._mime_to_hash[identifier] = digest
        return identifier

    def load(self, category: Category, text: str) -> tuple[int, int]:
        """Insert every row of a CSV source; returns ``(inserted, skipped)``."""
        inserted = skipped = 0
        for row in parse_rows(text):
            if row is not None and self.insert(category, row) is not None:
                inserted += 1
            else:
                skipped += 1
        return inserted, skipped

    def all_mime_to_hash(self) -> list[tuple[str, bytes]]:
        return sorted(self._mime_to_hash.items())

    def all_hash_to_mime(self) -> list[tuple[bytes, str]]:
        return sorted(self._hash_to_mime.items())

    def mime_by_hash(self, hash_hex: str) -> str | None:
        if len(hash_hex) != DIGEST_SIZE * 2:
            return None
        try:
            digest = binascii.unhexlify(hash_hex)
        except (binascii.Error, ValueError):
            return None
        return self._hash_to_mime.get(digest)

    def hash_of_mime(self, identifier: str) -> str | None:
        digest = self._mime_to_hash.get(identifier)
        return digest.hex() if digest is not None else None


def load_seed_table() -> TranslationTable:
    """Build a table from the bundled snapshot of every category."""
    table = TranslationTable()
    for category in Category:
        inserted, skipped = table.load(category, category.seed_text())
        logger.info("Seeded %s: %d entries (%d skipped)", category, inserted, skipped)
    logger.info("Seed table ready with %d MIME types", len(table))
    return table


class SharedTable:
    """Single-writer/many-readers access to a :class:`TranslationTable`.

    Writers hold the lock for one row at a time, so a reader may see a
    refresh half-applied across identifiers but never a torn pair.
    """

    def __init__(self, table: TranslationTable | None = None) -> None:
        self._table = table if table is not None else TranslationTable()
        self._lock = aiorwlock.RWLock()

    async def size(self) -> int:
        async with self._lock.reader_lock:
            return len(self._table)

    async def insert(self, category: Category, row: RegistryRow) -> str | None:
        async with self._lock.writer_lock:
            return self._table.insert(category, row)

    async def all_mime_to_hash(self) -> list[tuple[str, str]]:
        async with self._lock.reader_lock:
            entries = self._table.all_mime_to_hash()
        return [(identifier, digest.hex()) for identifier, digest in entries]

    async def all_hash_to_mime(self) -> list[tuple[str, str]]:
        async with self._lock.reader_lock:
            entries = self._table.all_hash_to_mime()
        return [(digest.hex(), identifier) for digest, identifier in entries]

    async def mime_by_hash(self, hash_hex: str) -> str | None:
        async with self._lock.reader_lock:
            return self._table.mime_by_hash(hash_hex)

    async def hash_of_mime(self, identifier: str) -> str | None:
        async with self._lock.reader_lock:
            return self._table.hash_of_mime(identifier)
