"""FastAPI dependency injection — DB session & site store."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from zipsites.config import settings
from zipsites.database import get_db
from zipsites.services.site_store import DatabaseSiteStore, SiteStore


async def get_site_store(db: AsyncSession = Depends(get_db)) -> SiteStore:
    """Per-request object store bound to the request's DB session."""
    return DatabaseSiteStore(
        db,
        settings.blob_dir,
        max_object_bytes=settings.max_object_bytes or None,
    )
