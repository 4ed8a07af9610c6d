"""Serve hosted sites under /s/<site_id>/."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from zipsites.api.deps import get_site_store
from zipsites.config import settings
from zipsites.services.errors import ServeError, SiteFileNotFoundError
from zipsites.services.site_server import SiteServer
from zipsites.services.site_store import SiteStore

router = APIRouter()


@router.get("/s/{site_id}", include_in_schema=False)
@router.get("/s/{site_id}/{file_path:path}", include_in_schema=False)
async def serve_site_file(
    site_id: str,
    file_path: str = "",
    store: SiteStore = Depends(get_site_store),
):
    """Serve a site file; unknown paths fall back to the site's index.html."""
    server = SiteServer(store, cache_max_age=settings.cache_max_age_seconds)
    try:
        served = await server.serve(site_id, file_path)
    except SiteFileNotFoundError:
        raise HTTPException(404, "File not found")
    except ServeError:
        raise HTTPException(500, "Error serving site")

    headers = {"Cache-Control": served.cache_control} if served.cache_control else None
    return Response(content=served.body, media_type=served.content_type, headers=headers)
