"""Site object store — async key/blob interface and its SQLite + disk backend."""

from __future__ import annotations

import abc
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from zipsites.models.stored_object import StoredObjectRow
from zipsites.services.errors import StoreReadError, StoreWriteError
from zipsites.utils.hashing import hash_bytes
from zipsites.utils.storage import get_directory_size

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in SQLite DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class ObjectInfo:
    key: str
    content_type: str
    size: int
    sha256: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: StoredObjectRow) -> ObjectInfo:
        return cls(
            key=row.key,
            content_type=row.content_type,
            size=row.size_bytes,
            sha256=row.hash_sha256,
            created_at=row.created_at,
        )


@dataclass
class StoredObject:
    info: ObjectInfo
    body: bytes

    @property
    def content_type(self) -> str:
        return self.info.content_type

    def text(self) -> str:
        """Decode the body as UTF-8, replacing undecodable bytes."""
        return self.body.decode("utf-8", errors="replace")


@dataclass
class StoreStats:
    object_count: int
    stored_bytes: int  # Sum of object sizes (shared blobs counted per key)
    blob_bytes: int  # Bytes actually on disk


class SiteStore(abc.ABC):
    """Durable key/value blob store holding site files and manifests."""

    @abc.abstractmethod
    async def put(self, key: str, content: bytes, content_type: str) -> ObjectInfo:
        """Store ``content`` under ``key``. Raises StoreWriteError."""

    @abc.abstractmethod
    async def get(self, key: str) -> StoredObject | None:
        """Return the object or None. Raises StoreReadError on backend faults."""

    @abc.abstractmethod
    async def head(self, key: str) -> ObjectInfo | None:
        """Metadata only."""

    @abc.abstractmethod
    async def exists_prefix(self, prefix: str) -> bool:
        ...

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove ``key``. Returns False if it did not exist."""

    @abc.abstractmethod
    async def stats(self) -> StoreStats:
        ...

    @abc.abstractmethod
    async def list(self, prefix: str) -> list[str]:
        """All keys starting with ``prefix``, in key order."""


class DatabaseSiteStore(SiteStore):
    """Key metadata in SQLite, bodies on disk.

    Every key owns its own blob file, named after the SHA-256 of the key, so
    writing or deleting one key never touches another key's body. The row
    records the SHA-256 of the content.
    """

    def __init__(
        self,
        session: AsyncSession,
        blob_dir: str | Path,
        max_object_bytes: int | None = None,
    ):
        self._session = session
        self._blob_dir = Path(blob_dir)
        self._max_object_bytes = max_object_bytes

    def _blob_path(self, key: str) -> Path:
        name = hash_bytes(key.encode("utf-8"))
        return self._blob_dir / name[:2] / name

    def _write_blob(self, key: str, content: bytes) -> None:
        blob = self._blob_path(key)
        blob.parent.mkdir(parents=True, exist_ok=True)
        tmp = blob.parent / f".{blob.name}.{uuid.uuid4().hex}.tmp"
        tmp.write_bytes(content)
        os.replace(tmp, blob)

    async def put(self, key: str, content: bytes, content_type: str) -> ObjectInfo:
        if self._max_object_bytes is not None and len(content) > self._max_object_bytes:
            raise StoreWriteError(
                f"Object {key} is {len(content)} bytes, limit is {self._max_object_bytes}"
            )

        try:
            self._write_blob(key, content)
        except OSError as e:
            raise StoreWriteError(f"Failed to write blob for {key}: {e}") from e

        try:
            row = StoredObjectRow(
                key=key,
                content_type=content_type,
                size_bytes=len(content),
                hash_sha256=hash_bytes(content),
                created_at=utcnow(),
            )
            row = await self._session.merge(row)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreWriteError(f"Failed to record {key}: {e}") from e

        logger.debug("Stored %s (%d bytes, %s)", key, len(content), content_type)
        return ObjectInfo.from_row(row)

    async def head(self, key: str) -> ObjectInfo | None:
        try:
            row = await self._session.get(StoredObjectRow, key)
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to look up {key}: {e}") from e
        return ObjectInfo.from_row(row) if row else None

    async def get(self, key: str) -> StoredObject | None:
        info = await self.head(key)
        if info is None:
            return None
        try:
            body = self._blob_path(key).read_bytes()
        except OSError as e:
            raise StoreReadError(f"Blob for {key} is unreadable: {e}") from e
        return StoredObject(info=info, body=body)

    async def exists_prefix(self, prefix: str) -> bool:
        try:
            result = await self._session.execute(
                select(StoredObjectRow.key)
                .where(StoredObjectRow.key.startswith(prefix, autoescape=True))
                .limit(1)
            )
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to query prefix {prefix}: {e}") from e
        return result.scalar_one_or_none() is not None

    async def delete(self, key: str) -> bool:
        try:
            row = await self._session.get(StoredObjectRow, key)
            if row is None:
                return False
            await self._session.delete(row)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StoreWriteError(f"Failed to delete {key}: {e}") from e
        try:
            self._blob_path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StoreWriteError(f"Failed to remove blob for {key}: {e}") from e
        return True

    async def stats(self) -> StoreStats:
        try:
            result = await self._session.execute(
                select(
                    func.count(StoredObjectRow.key),
                    func.coalesce(func.sum(StoredObjectRow.size_bytes), 0),
                )
            )
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to compute store stats: {e}") from e
        count, total = result.one()
        blob_bytes = get_directory_size(self._blob_dir) if self._blob_dir.exists() else 0
        return StoreStats(object_count=count, stored_bytes=total, blob_bytes=blob_bytes)

    async def list(self, prefix: str) -> list[str]:
        try:
            result = await self._session.execute(
                select(StoredObjectRow.key)
                .where(StoredObjectRow.key.startswith(prefix, autoescape=True))
                .order_by(StoredObjectRow.key)
            )
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to list {prefix}: {e}") from e
        return list(result.scalars().all())
