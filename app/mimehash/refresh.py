"""Pulls the live registry CSVs and merges them into the shared table."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from aiohttp import ClientError, ClientSession, ClientTimeout

from .catalog import Category
from .rows import parse_rows
from .table import SharedTable

logger = logging.getLogger(__name__)


class RefreshError(Exception):
    """A registry source could not be fetched; the cycle was abandoned."""

    def __init__(self, category: Category, url: str, reason: str) -> None:
        super().__init__(f"Refresh of {category} from {url} failed: {reason}")
        self.category = category
        self.url = url


@dataclass
class RefreshStats:
    categories: int = 0
    inserted: int = 0
    skipped: int = 0
    failed_rows: int = 0


class RefreshEngine:
    """Fetches every category source in catalog order.

    A transport failure aborts the remaining categories; rows already
    merged from earlier categories stay in the table.
    """

    def __init__(
        self,
        table: SharedTable,
        *,
        base_url: str,
        user_agent: str,
        timeout: float = 60.0,
    ) -> None:
        self._table = table
        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout = ClientTimeout(total=timeout)

    @property
    def user_agent(self) -> str:
        return self._user_agent

    async def refresh_all(self) -> RefreshStats:
        logger.info("Updating MIME list from %s with user-agent %r ...", self._base_url, self._user_agent)
        stats = RefreshStats()
        async with ClientSession(
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout,
            raise_for_status=True,
        ) as session:
            for category in Category:
                text = await self._fetch(session, category)
                await self._merge(category, text, stats)
                stats.categories += 1
        logger.info(
            "MIME update finished: %d inserted, %d skipped, %d unreadable rows",
            stats.inserted, stats.skipped, stats.failed_rows,
        )
        return stats

    async def _fetch(self, session: ClientSession, category: Category) -> str:
        url = category.source_url(self._base_url)
        logger.info("MIME source: %s", url)
        try:
            async with session.get(url) as resp:
                return await resp.text(encoding="utf-8")
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            raise RefreshError(category, url, str(exc) or type(exc).__name__) from exc

    async def _merge(self, category: Category, text: str, stats: RefreshStats) -> None:
        for row in parse_rows(text):
            if row is None:
                logger.error("Failed to parse CSV row for category %s", category)
                stats.failed_rows += 1
                continue
            if await self._table.insert(category, row) is None:
                stats.skipped += 1
            else:
                stats.inserted += 1
