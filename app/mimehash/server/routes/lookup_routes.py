"""MIME/digest lookup routes -- /mime and /hash."""

from __future__ import annotations

from aiohttp import web

from ...table import SharedTable


class LookupRoutes:
    """Read-only HTTP view of the translation table.

    Unknown and malformed keys both answer 404; anything that does not
    match a lookup route answers 403.
    """

    def __init__(self, table: SharedTable) -> None:
        self._table = table

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/mime", self._all_mime_to_hash, allow_head=False)
        router.add_get("/hash", self._all_hash_to_mime, allow_head=False)
        router.add_get("/mime/{hash_hex}", self._mime_by_hash, allow_head=False)
        # Identifiers contain a slash, e.g. /hash/image/png
        router.add_get("/hash/{identifier:.+}", self._hash_of_mime, allow_head=False)
        router.add_route("*", "/{tail:.*}", self._reject)

    async def _all_mime_to_hash(self, _req: web.Request) -> web.Response:
        return web.json_response(await self._table.all_mime_to_hash())

    async def _all_hash_to_mime(self, _req: web.Request) -> web.Response:
        return web.json_response(await self._table.all_hash_to_mime())

    async def _mime_by_hash(self, req: web.Request) -> web.Response:
        identifier = await self._table.mime_by_hash(req.match_info["hash_hex"])
        if identifier is None:
            return web.Response(status=404)
        return web.Response(text=identifier)

    async def _hash_of_mime(self, req: web.Request) -> web.Response:
        hash_hex = await self._table.hash_of_mime(req.match_info["identifier"])
        if hash_hex is None:
            return web.Response(status=404)
        return web.Response(text=hash_hex)

    async def _reject(self, _req: web.Request) -> web.Response:
        return web.Response(status=403)
