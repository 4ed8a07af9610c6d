"""ZIP archive extraction into a site's object namespace."""

from __future__ import annotations

import io
import logging
import zlib
from pathlib import PurePosixPath
from zipfile import BadZipFile, LargeZipFile, ZipFile, ZipInfo

from zipsites.schemas.site import FileEntry
from zipsites.services.errors import DecodeError, UnsafeArchivePathError
from zipsites.services.mime import get_mime_type
from zipsites.services.site_store import SiteStore

logger = logging.getLogger(__name__)


def site_key(site_id: str, name: str) -> str:
    """Storage key of a site file."""
    return f"sites/{site_id}/{name}"


def normalize_member_name(name: str) -> str:
    """Normalize an archive member name into a site-relative path.

    - Convert backslashes to slashes
    - Drop empty and ``.`` segments (including a leading ``./``)
    - Reject absolute paths and ``..`` traversal
    """
    path = name.replace("\\", "/")
    if PurePosixPath(path).is_absolute() or (path[1:3] == ":/" and path[:1].isalpha()):
        raise UnsafeArchivePathError(f"Absolute path in archive: {name!r}")

    parts: list[str] = []
    for part in path.split("/"):
        if part in {"", "."}:
            continue
        if part == "..":
            raise UnsafeArchivePathError(f"Path traversal in archive: {name!r}")
        parts.append(part)

    if not parts:
        raise UnsafeArchivePathError(f"Empty path in archive: {name!r}")
    return "/".join(parts)


class ArchiveExtractor:
    """Unpacks ZIP archives into a SiteStore, one object per file member."""

    def __init__(self, store: SiteStore):
        self._store = store

    @staticmethod
    def _open(archive_bytes: bytes) -> ZipFile:
        try:
            return ZipFile(io.BytesIO(archive_bytes))
        except (BadZipFile, LargeZipFile, OSError) as e:
            raise DecodeError(f"Not a valid ZIP archive: {e}") from e

    @staticmethod
    def _read_member(archive: ZipFile, info: ZipInfo) -> bytes:
        try:
            return archive.read(info)
        except (BadZipFile, zlib.error, EOFError, OSError) as e:
            raise DecodeError(f"Cannot decompress {info.filename!r}: {e}") from e
        except (NotImplementedError, RuntimeError) as e:
            # Unsupported compression method or encrypted member
            raise DecodeError(f"Cannot decompress {info.filename!r}: {e}") from e

    async def extract(self, archive_bytes: bytes, site_id: str) -> list[FileEntry]:
        """Write every file member to ``sites/<site_id>/<name>``.

        Directory members are skipped. Members are processed in archive
        order and written one at a time; a failure aborts the extraction
        and leaves the files written so far in the store.

        Raises:
            DecodeError: the bytes are not a ZIP archive, a member name is
                unsafe, or a member cannot be decompressed.
            StoreWriteError: the store rejected a write.
        """
        files: list[FileEntry] = []
        with self._open(archive_bytes) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue

                name = normalize_member_name(info.filename)
                content = self._read_member(archive, info)
                content_type = get_mime_type(name)
                key = site_key(site_id, name)

                await self._store.put(key, content, content_type)
                files.append(FileEntry(name=name, type=content_type, size=len(content), path=key))

        logger.info("Extracted %d files for site %s", len(files), site_id)
        return files
