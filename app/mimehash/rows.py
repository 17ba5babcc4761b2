"""Registry CSV rows and their normalization into MIME identifiers."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterator
from dataclasses import dataclass

import blake3

from .catalog import Category

logger = logging.getLogger(__name__)

DIGEST_SIZE = 32

_NAME = "Name"
_TEMPLATE = "Template"
_REFERENCE = "Reference"


@dataclass(frozen=True, slots=True)
class RegistryRow:
    """One candidate media type as listed by the registry."""

    name: str
    template: str | None = None
    reference: str | None = None


def parse_rows(text: str) -> Iterator[RegistryRow | None]:
    """Yield one entry per CSV record after the header.

    Records that cannot be read as a row (wrong field count, missing
    ``Name``, malformed quoting) are yielded as ``None`` so callers can
    skip them one at a time and keep going.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        header = next(reader)
    except (StopIteration, csv.Error):
        return
    if header:
        header[0] = header[0].lstrip("\ufeff")
    columns = {title.strip(): idx for idx, title in enumerate(header)}
    if _NAME not in columns:
        logger.warning("CSV header has no %r column: %s", _NAME, header)
        return

    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            logger.debug("Unreadable CSV record at line %d: %s", reader.line_num, exc)
            yield None
            continue
        if not record:
            continue
        yield _to_row(record, columns, len(header))


def _to_row(record: list[str], columns: dict[str, int], width: int) -> RegistryRow | None:
    if len(record) != width:
        return None
    name = record[columns[_NAME]]
    if not name:
        return None
    return RegistryRow(
        name=name,
        template=_optional(record, columns.get(_TEMPLATE)),
        reference=_optional(record, columns.get(_REFERENCE)),
    )


def _optional(record: list[str], idx: int | None) -> str | None:
    if idx is None:
        return None
    return record[idx] or None


def normalize(category: Category, row: RegistryRow) -> str | None:
    """Return the canonical identifier for *row*, or ``None`` to skip it."""
    if "deprecated" in row.name.lower():
        return None
    if " " in row.name:
        return None
    if row.template:
        return row.template
    return f"{category.value}/{row.name}"


def compute_digest(identifier: str) -> bytes:
    """BLAKE3 digest of the identifier's UTF-8 bytes."""
    return blake3.blake3(identifier.encode("utf-8")).digest()
