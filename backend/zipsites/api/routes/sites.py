"""Site management routes — ZIP upload, listing, manifests."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import ValidationError

from zipsites.api.deps import get_site_store
from zipsites.config import settings
from zipsites.schemas.site import SiteList, SiteManifest, UploadedFile, UploadResponse
from zipsites.services.errors import (
    DecodeError,
    EmptySiteError,
    IdExhaustedError,
    StoreError,
)
from zipsites.services.site_builder import create_site, list_sites, load_manifest
from zipsites.services.site_store import SiteStore
from zipsites.utils.storage import format_bytes

logger = logging.getLogger(__name__)
router = APIRouter()


def _too_large() -> HTTPException:
    return HTTPException(400, f"File too large. Max {format_bytes(settings.max_upload_bytes)}")


@router.post("/upload", response_model=UploadResponse)
async def upload_site(
    request: Request,
    zipfile: UploadFile = File(...),
    site_name: str = Form("", alias="siteName"),
    store: SiteStore = Depends(get_site_store),
):
    """Create a hosted site from an uploaded ZIP archive."""
    if zipfile.content_type not in settings.allowed_upload_types:
        raise HTTPException(400, "Only ZIP files allowed")

    if zipfile.size is not None and zipfile.size > settings.max_upload_bytes:
        raise _too_large()
    archive_bytes = await zipfile.read()
    if len(archive_bytes) > settings.max_upload_bytes:
        raise _too_large()

    base_url = settings.public_base_url or str(request.base_url)
    try:
        site = await create_site(
            store,
            archive_bytes,
            name=site_name,
            base_url=base_url,
            id_length=settings.site_id_length,
            id_attempts=settings.site_id_attempts,
        )
    except DecodeError as e:
        raise HTTPException(400, f"Invalid ZIP archive: {e}")
    except EmptySiteError as e:
        raise HTTPException(400, str(e))
    except IdExhaustedError as e:
        logger.error("Upload failed: %s", e)
        raise HTTPException(503, str(e))
    except StoreError as e:
        logger.error("Upload of %s failed: %s", zipfile.filename, e)
        raise HTTPException(500, f"Failed to store site: {e}")

    return UploadResponse(
        message="Website created successfully!",
        site=site,
        files=[
            UploadedFile(name=f.name, type=f.type, size=f.size, url=f"{site.url}/{f.name}")
            for f in site.files
        ],
    )


@router.get("/sites", response_model=SiteList)
async def get_sites(store: SiteStore = Depends(get_site_store)):
    """All published sites."""
    try:
        sites = await list_sites(store)
    except StoreError as e:
        logger.error("Listing sites failed: %s", e)
        raise HTTPException(500, "Failed to list sites")
    return SiteList(sites=sites)


@router.get("/sites/{site_id}", response_model=SiteManifest)
async def get_site(site_id: str, store: SiteStore = Depends(get_site_store)):
    """Manifest of one site."""
    try:
        manifest = await load_manifest(store, site_id)
    except (StoreError, ValidationError) as e:
        logger.error("Reading manifest of %s failed: %s", site_id, e)
        raise HTTPException(500, "Failed to read site manifest")
    if manifest is None:
        raise HTTPException(404, "Site not found")
    return manifest
