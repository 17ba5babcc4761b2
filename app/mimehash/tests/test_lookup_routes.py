"""Tests for lookup route handlers using aiohttp TestClient."""

from __future__ import annotations

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from app.mimehash.catalog import Category
from app.mimehash.rows import RegistryRow, compute_digest
from app.mimehash.server.routes.lookup_routes import LookupRoutes
from app.mimehash.table import SharedTable, load_seed_table


def _build_app(setup_fn) -> web.Application:
    app = web.Application()
    setup_fn(app.router)
    return app


class TestLookupRoutes:
    @pytest.fixture()
    def routes(self, shared_table: SharedTable) -> LookupRoutes:
        return LookupRoutes(shared_table)

    @pytest.mark.asyncio
    async def test_all_mime(self, routes: LookupRoutes) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get("/mime")
            assert resp.status == 200
            assert resp.content_type == "application/json"
            data = await resp.json()
            assert [pair[0] for pair in data] == ["application/json", "image/png", "text/plain"]
            assert data[1] == ["image/png", compute_digest("image/png").hex()]

    @pytest.mark.asyncio
    async def test_all_hash(self, routes: LookupRoutes) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get("/hash")
            assert resp.status == 200
            data = await resp.json()
            assert len(data) == 3
            assert [pair[0] for pair in data] == sorted(pair[0] for pair in data)
            assert [compute_digest("text/plain").hex(), "text/plain"] in data

    @pytest.mark.asyncio
    async def test_hash_of_mime_with_slash(self, routes: LookupRoutes) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get("/hash/image/png")
            assert resp.status == 200
            assert await resp.text() == compute_digest("image/png").hex()

    @pytest.mark.asyncio
    async def test_mime_by_hash(self, routes: LookupRoutes) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get(f"/mime/{compute_digest('application/json').hex()}")
            assert resp.status == 200
            assert resp.content_type == "text/plain"
            assert await resp.text() == "application/json"

    @pytest.mark.asyncio
    async def test_unknown_identifier_404(self, routes: LookupRoutes) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get("/hash/nonexistent/type")
            assert resp.status == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["abc", "00" * 32, "zz" * 32, "00" * 33])
    async def test_bad_or_unknown_digest_404(self, routes: LookupRoutes, key: str) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get(f"/mime/{key}")
            assert resp.status == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/"),
            ("GET", "/health"),
            ("GET", "/mime/"),
            ("GET", "/mime/a/b"),
            ("POST", "/mime"),
            ("PUT", "/hash/image/png"),
            ("DELETE", "/hash"),
            ("HEAD", "/mime"),
            ("HEAD", "/hash"),
            ("HEAD", "/hash/image/png"),
        ],
    )
    async def test_unmapped_forbidden(self, routes: LookupRoutes, method: str, path: str) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.request(method, path)
            assert resp.status == 403

    @pytest.mark.asyncio
    async def test_reads_live_table(self, routes: LookupRoutes, shared_table: SharedTable) -> None:
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            assert (await client.get("/hash/font/woff2")).status == 404
            await shared_table.insert(Category.FONT, RegistryRow(name="woff2"))
            resp = await client.get("/hash/font/woff2")
            assert resp.status == 200
            assert "Cache-Control" not in resp.headers


class TestSeededLookup:
    @pytest.mark.asyncio
    async def test_png_end_to_end(self) -> None:
        routes = LookupRoutes(SharedTable(load_seed_table()))
        app = _build_app(routes.register)
        async with TestClient(TestServer(app)) as client:
            resp = await client.get("/hash/image/png")
            assert resp.status == 200
            hash_hex = await resp.text()
            assert hash_hex == compute_digest("image/png").hex()

            resp = await client.get(f"/mime/{hash_hex}")
            assert resp.status == 200
            assert await resp.text() == "image/png"
