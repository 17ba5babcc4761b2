"""Lookup server -- app factory and entry point."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger

from .. import __version__
from ..config.settings import cfg
from ..refresh import RefreshEngine
from ..scheduler import RefreshScheduler
from ..table import SharedTable, TranslationTable, load_seed_table
from .routes.lookup_routes import LookupRoutes

logger = logging.getLogger(__name__)

_QUIET_STATUSES = frozenset({403, 404})


# ---------------------------------------------------------------------------
# Access logger
# ---------------------------------------------------------------------------


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes rejected and not-found lookups to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        level = logging.DEBUG if response.status in _QUIET_STATUSES else logging.INFO
        self.logger.log(
            level,
            "%s %s %s %s %.6fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

_CORS_ALLOW_METHODS = "GET, HEAD, POST, PUT, PATCH, DELETE, OPTIONS"


@web.middleware
async def cors_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    origin = request.headers.get("Origin")
    if (
        request.method == "OPTIONS"
        and origin
        and "Access-Control-Request-Method" in request.headers
    ):
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": _CORS_ALLOW_METHODS,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Max-Age": "3600",
        }
        requested = request.headers.get("Access-Control-Request-Headers")
        if requested:
            headers["Access-Control-Allow-Headers"] = requested
        return web.Response(status=200, headers=headers)

    response = await handler(request)
    if origin:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Vary"] = "Origin"
    else:
        response.headers["Access-Control-Allow-Origin"] = "*"
    return response


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


async def create_app() -> web.Application:
    factory = AppFactory()
    return await factory.build()


class AppFactory:
    """Builds the aiohttp application with the table, refresher and routes wired."""

    def __init__(
        self,
        *,
        table: TranslationTable | None = None,
        registry_url: str | None = None,
        refresh_interval: float | None = None,
        max_payload_size: int | None = None,
    ) -> None:
        self._seed = table
        self._registry_url = registry_url or cfg.registry_url
        self._refresh_interval = refresh_interval or cfg.refresh_interval
        self._max_payload_size = max_payload_size or cfg.max_payload_size

    async def build(self) -> web.Application:
        seed = self._seed if self._seed is not None else await asyncio.to_thread(load_seed_table)
        self._table = SharedTable(seed)
        self._engine = RefreshEngine(
            self._table,
            base_url=self._registry_url,
            user_agent=cfg.user_agent,
            timeout=cfg.refresh_timeout,
        )
        self._scheduler = RefreshScheduler(self._engine, self._refresh_interval)

        app = web.Application(
            middlewares=[cors_middleware],
            client_max_size=self._max_payload_size,
        )
        app["table"] = self._table
        app["engine"] = self._engine
        app["scheduler"] = self._scheduler

        LookupRoutes(self._table).register(app.router)
        app.on_startup.append(self._on_startup)
        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _on_startup(self, app: web.Application) -> None:
        logger.info(
            "Refreshing from %s every %.0fs", self._registry_url, self._scheduler.interval,
        )
        app["refresh_task"] = asyncio.create_task(self._scheduler.run())

    async def _on_cleanup(self, app: web.Application) -> None:
        task = app.get("refresh_task")
        if task and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    logging.basicConfig(
        level=cfg.log_level_value,
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    logger.info("Starting mimehash %s on %s:%d ...", __version__, cfg.host, cfg.port)
    web.run_app(
        create_app(),
        host=cfg.host,
        port=cfg.port,
        access_log_class=QuietAccessLogger,
    )


if __name__ == "__main__":
    main()
