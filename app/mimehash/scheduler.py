"""Fixed-interval driver for the refresh engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .refresh import RefreshEngine, RefreshStats

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Runs :meth:`RefreshEngine.refresh_all` on absolute deadlines.

    Deadlines advance by exactly *interval* from the previous deadline,
    independent of how long a refresh takes.  A refresh that overruns
    makes the next one start immediately.
    """

    def __init__(
        self,
        engine: RefreshEngine,
        interval: float,
        *,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval}")
        self._engine = engine
        self._interval = interval
        self._clock = clock
        self._sleep = sleep
        self.runs = 0

    @property
    def interval(self) -> float:
        return self._interval

    async def run_once(self) -> RefreshStats | None:
        """Run one refresh; failures are logged and reported as ``None``."""
        self.runs += 1
        try:
            stats = await self._engine.refresh_all()
        except Exception as exc:
            logger.error("MIME refresh failed: %s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
            return None
        logger.debug("Refresh %d done: %d categories", self.runs, stats.categories)
        return stats

    async def run(self) -> None:
        clock = self._clock or asyncio.get_running_loop().time
        deadline = clock() + self._interval
        while True:
            await self._sleep(max(0.0, deadline - clock()))
            await self.run_once()
            deadline += self._interval
