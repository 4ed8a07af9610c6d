"""Reclaim objects of sites whose manifest was never written."""

from __future__ import annotations

import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from zipsites.config import settings
from zipsites.database import async_session
from zipsites.services.site_builder import manifest_key
from zipsites.services.site_store import DatabaseSiteStore, SiteStore, utcnow

logger = logging.getLogger(__name__)

SITES_PREFIX = "sites/"


async def find_orphaned_sites(store: SiteStore, grace: timedelta) -> dict[str, list[str]]:
    """Map of site id -> keys for manifest-less sites idle longer than ``grace``."""
    by_site: dict[str, list[str]] = {}
    for key in await store.list(SITES_PREFIX):
        site_id = key[len(SITES_PREFIX):].split("/", 1)[0]
        by_site.setdefault(site_id, []).append(key)

    cutoff = utcnow() - grace
    orphans: dict[str, list[str]] = {}
    for site_id, keys in by_site.items():
        if await store.head(manifest_key(site_id)) is not None:
            continue
        # An upload still in flight keeps writing; only sweep once it went quiet
        newest = None
        for key in keys:
            info = await store.head(key)
            if info and (newest is None or info.created_at > newest):
                newest = info.created_at
        if newest is not None and newest > cutoff:
            continue
        orphans[site_id] = keys
    return orphans


async def sweep_orphans(store: SiteStore, grace: timedelta) -> int:
    """Delete every object of orphaned sites. Returns the number deleted."""
    deleted = 0
    orphans = await find_orphaned_sites(store, grace)
    for site_id, keys in orphans.items():
        for key in keys:
            if await store.delete(key):
                deleted += 1
        logger.info("Swept orphaned site %s (%d objects)", site_id, len(keys))
    return deleted


class SweepScheduler:
    """Runs the orphan sweep periodically."""

    def __init__(self, interval_minutes: int | None = None, grace_minutes: int | None = None):
        if interval_minutes is None:
            interval_minutes = settings.sweep_interval_minutes
        if grace_minutes is None:
            grace_minutes = settings.orphan_grace_minutes
        self._interval = interval_minutes
        self._grace = timedelta(minutes=grace_minutes)
        self._scheduler = AsyncIOScheduler(
            job_defaults={"coalesce": True, "max_instances": 1}
        )

    def start(self) -> None:
        self._scheduler.add_job(
            self._sweep,
            "interval",
            minutes=self._interval,
            id="sweep_orphans",
            name="Sweep orphaned site objects",
        )
        self._scheduler.start()
        logger.info("Orphan sweeper started — every %d min, grace %s", self._interval, self._grace)

    async def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Orphan sweeper stopped")

    async def _sweep(self) -> None:
        try:
            async with async_session() as db:
                store = DatabaseSiteStore(db, settings.blob_dir)
                count = await sweep_orphans(store, self._grace)
                if count:
                    logger.info("Orphan sweep removed %d objects", count)
        except Exception as e:
            logger.error("Orphan sweep failed: %s", e)
