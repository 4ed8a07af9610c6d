"""Archive-to-site pipeline: id generation, extraction, manifest persistence."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timezone

from pydantic import ValidationError

from zipsites.schemas.site import SiteManifest
from zipsites.services.archive import ArchiveExtractor
from zipsites.services.entry_point import resolve_entry_point
from zipsites.services.errors import EmptySiteError, IdExhaustedError
from zipsites.services.site_store import SiteStore

logger = logging.getLogger(__name__)

SITE_ID_ALPHABET = string.ascii_lowercase + string.digits
MANIFEST_PREFIX = "manifests/"
MANIFEST_CONTENT_TYPE = "application/json"


def manifest_key(site_id: str) -> str:
    return f"{MANIFEST_PREFIX}{site_id}.json"


def new_site_id(length: int = 8) -> str:
    """Random id from [a-z0-9] using a cryptographically strong source."""
    return "".join(secrets.choice(SITE_ID_ALPHABET) for _ in range(length))


async def generate_site_id(store: SiteStore, length: int = 8, attempts: int = 5) -> str:
    """Draw a site id whose namespace is still unused in ``store``."""
    for _ in range(attempts):
        site_id = new_site_id(length)
        taken = (
            await store.exists_prefix(f"sites/{site_id}/")
            or await store.head(manifest_key(site_id)) is not None
        )
        if not taken:
            return site_id
        logger.warning("Site id collision on %s, drawing again", site_id)
    raise IdExhaustedError(f"No free site id after {attempts} attempts")


async def create_site(
    store: SiteStore,
    archive_bytes: bytes,
    name: str,
    base_url: str,
    id_length: int = 8,
    id_attempts: int = 5,
) -> SiteManifest:
    """Extract an archive into a new site and persist its manifest.

    The manifest is written last; until it exists the site is not listed,
    and objects from a failed extraction are left for the orphan sweeper.
    """
    site_id = await generate_site_id(store, length=id_length, attempts=id_attempts)
    files = await ArchiveExtractor(store).extract(archive_bytes, site_id)
    if not files:
        raise EmptySiteError("Archive contains no files")

    entry_point = resolve_entry_point(files)
    base_url = base_url.rstrip("/")
    manifest = SiteManifest(
        id=site_id,
        name=name.strip() or site_id,
        files=files,
        entry_point=entry_point,
        created_at=datetime.now(timezone.utc),
        url=f"{base_url}/s/{site_id}",
        direct_url=f"{base_url}/s/{site_id}/{entry_point}",
    )

    await store.put(
        manifest_key(site_id),
        manifest.model_dump_json(by_alias=True).encode("utf-8"),
        MANIFEST_CONTENT_TYPE,
    )
    logger.info(
        "Created site %s (%r): %d files, entry point %s",
        site_id, manifest.name, len(files), entry_point,
    )
    return manifest


async def load_manifest(store: SiteStore, site_id: str) -> SiteManifest | None:
    obj = await store.get(manifest_key(site_id))
    if obj is None:
        return None
    return SiteManifest.model_validate_json(obj.body)


async def list_sites(store: SiteStore) -> list[SiteManifest]:
    """Every site whose manifest has been written, in id order."""
    sites: list[SiteManifest] = []
    for key in await store.list(MANIFEST_PREFIX):
        obj = await store.get(key)
        if obj is None:
            continue
        try:
            sites.append(SiteManifest.model_validate_json(obj.body))
        except ValidationError as e:
            logger.warning("Skipping unreadable manifest %s: %s", key, e)
    return sites
