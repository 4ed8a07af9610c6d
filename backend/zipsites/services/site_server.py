"""Resolve hosted-site requests to stored files, with index.html fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from zipsites.services.archive import site_key
from zipsites.services.errors import ServeError, SiteFileNotFoundError, StoreError
from zipsites.services.mime import get_mime_type, is_html_type
from zipsites.services.path_rewriter import rewrite_relative_paths
from zipsites.services.site_store import SiteStore, StoredObject

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"


def mount_path(site_id: str) -> str:
    """URL prefix a site is served under."""
    return f"/s/{site_id}/"


@dataclass
class ServedFile:
    body: bytes | str  # str for rewritten HTML
    content_type: str
    cache_control: str | None = None
    fallback: bool = False  # Served index.html in place of a missing path


class SiteServer:
    """Serves stored site files; HTML is rewritten for the site's mount path."""

    def __init__(self, store: SiteStore, cache_max_age: int = 3600):
        self._store = store
        self._cache_max_age = cache_max_age

    async def _read(self, key: str) -> StoredObject | None:
        try:
            return await self._store.get(key)
        except StoreError as e:
            logger.error("Failed to read %s: %s", key, e)
            raise ServeError(f"Error serving {key}") from e

    def _render_html(self, obj: StoredObject, site_id: str) -> str:
        return rewrite_relative_paths(obj.text(), mount_path(site_id))

    async def serve(self, site_id: str, requested_path: str = "") -> ServedFile:
        """Return the file at ``requested_path`` of site ``site_id``.

        Content type always comes from the requested path's extension. A
        missing path falls back to the site's ``index.html`` so client-side
        routed sites work.

        The bare mount path (empty ``requested_path``) resolves only to
        ``index.html``. A site whose entry point is some other file is
        reachable at its manifest's ``directUrl``, not at ``url``.

        Raises:
            SiteFileNotFoundError: neither the path nor index.html exists.
            ServeError: the store failed while reading.
        """
        path = "/".join(p for p in requested_path.split("/") if p) or INDEX_DOCUMENT

        obj = await self._read(site_key(site_id, path))
        if obj is not None:
            content_type = get_mime_type(path)
            if is_html_type(content_type):
                return ServedFile(body=self._render_html(obj, site_id), content_type=content_type)
            return ServedFile(
                body=obj.body,
                content_type=content_type,
                cache_control=f"public, max-age={self._cache_max_age}",
            )

        if path != INDEX_DOCUMENT:
            index = await self._read(site_key(site_id, INDEX_DOCUMENT))
            if index is not None:
                logger.debug("Site %s: %s missing, serving index fallback", site_id, path)
                return ServedFile(
                    body=self._render_html(index, site_id),
                    content_type="text/html",
                    fallback=True,
                )

        raise SiteFileNotFoundError(f"{path} not found in site {site_id}")
