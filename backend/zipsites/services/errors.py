"""Error taxonomy for the archive-to-site pipeline."""

from __future__ import annotations


class SiteError(Exception):
    """Base class for every failure raised by the site services."""


class DecodeError(SiteError):
    """The upload is not a readable ZIP archive, or a member cannot be decompressed."""


class UnsafeArchivePathError(DecodeError):
    """An archive member name is absolute or escapes the site root with ``..``."""


class StoreError(SiteError):
    """The object store failed."""


class StoreWriteError(StoreError):
    """The object store rejected a write (quota, size limit, backend fault)."""


class StoreReadError(StoreError):
    """The object store failed while reading."""


class EmptySiteError(SiteError):
    """The archive produced no files."""


class IdExhaustedError(SiteError):
    """Every generated site id collided with an existing namespace."""


class SiteFileNotFoundError(SiteError):
    """Neither the requested path nor its index fallback exists."""


class ServeError(SiteError):
    """A backend fault occurred while serving a site file."""
