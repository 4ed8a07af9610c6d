"""System status — object store and disk usage."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from zipsites.api.deps import get_site_store
from zipsites.config import settings
from zipsites.schemas.system import StorageStatus
from zipsites.services.errors import StoreError
from zipsites.services.site_builder import MANIFEST_PREFIX
from zipsites.services.site_store import SiteStore
from zipsites.utils.storage import get_disk_usage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/storage", response_model=StorageStatus)
async def storage_status(store: SiteStore = Depends(get_site_store)):
    """Stored objects, published sites and free disk space."""
    try:
        stats = await store.stats()
        sites = await store.list(MANIFEST_PREFIX)
    except StoreError as e:
        logger.error("Storage status failed: %s", e)
        raise HTTPException(500, "Failed to read storage status")

    blob_dir = Path(settings.blob_dir)
    disk = get_disk_usage(blob_dir if blob_dir.exists() else blob_dir.anchor or "/")

    return StorageStatus(
        object_count=stats.object_count,
        stored_bytes=stats.stored_bytes,
        blob_bytes=stats.blob_bytes,
        site_count=len(sites),
        disk_total_gb=round(disk["total_bytes"] / 1024 / 1024 / 1024, 2),
        disk_used_gb=round(disk["used_bytes"] / 1024 / 1024 / 1024, 2),
        disk_percent=disk["percent"],
    )
