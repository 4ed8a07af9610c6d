"""Tests for serving hosted sites over HTTP."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from zipsites.api.deps import get_site_store
from zipsites.services.errors import StoreReadError


async def _publish(client: AsyncClient, archive: bytes) -> str:
    resp = await client.post(
        "/api/upload",
        files={"zipfile": ("site.zip", archive, "application/zip")},
    )
    assert resp.status_code == 200
    return resp.json()["site"]["id"]


@pytest.mark.asyncio
async def test_serves_rewritten_index(client: AsyncClient, make_archive):
    site_id = await _publish(client, make_archive({
        "index.html": '<link href="style.css"><img src="/img/a.png"><a href="https://x.org">x</a>',
        "style.css": "body{}",
    }))

    for path in (f"/s/{site_id}", f"/s/{site_id}/", f"/s/{site_id}/index.html"):
        resp = await client.get(path)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert resp.text == (
            f'<link href="/s/{site_id}/style.css">'
            f'<img src="/s/{site_id}/img/a.png">'
            '<a href="https://x.org">x</a>'
        )


@pytest.mark.asyncio
async def test_serves_raw_asset_with_cache_header(client: AsyncClient, make_archive):
    png = b"\x89PNG\r\n\x1a\nrest"
    site_id = await _publish(client, make_archive({"index.html": "x", "img/a.png": png}))

    resp = await client.get(f"/s/{site_id}/img/a.png")

    assert resp.status_code == 200
    assert resp.content == png
    assert resp.headers["content-type"] == "image/png"
    assert resp.headers["cache-control"] == "public, max-age=3600"


@pytest.mark.asyncio
async def test_unknown_path_falls_back_to_index(client: AsyncClient, make_archive):
    site_id = await _publish(client, make_archive({"index.html": '<a href="about">About</a>'}))

    resp = await client.get(f"/s/{site_id}/app/route/42")

    assert resp.status_code == 200
    assert resp.text == f'<a href="/s/{site_id}/about">About</a>'


@pytest.mark.asyncio
async def test_unknown_path_without_index_is_404(client: AsyncClient, make_archive):
    site_id = await _publish(client, make_archive({"home.html": "x"}))

    assert (await client.get(f"/s/{site_id}/missing.css")).status_code == 404
    assert (await client.get(f"/s/{site_id}/")).status_code == 404
    assert (await client.get(f"/s/{site_id}/home.html")).status_code == 200


@pytest.mark.asyncio
async def test_store_fault_is_500(client: AsyncClient):
    broken = AsyncMock()
    broken.get.side_effect = StoreReadError("disk gone")
    client._transport.app.dependency_overrides[get_site_store] = lambda: broken

    resp = await client.get("/s/abc/index.html")
    assert resp.status_code == 500
