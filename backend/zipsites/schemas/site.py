"""Site manifest schemas — persisted verbatim as the site's JSON manifest."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """One stored asset of a site."""
    name: str  # Archive-relative path, also the URL sub-path
    type: str  # Extension-derived content type
    size: int
    path: str  # Storage key: sites/<id>/<name>


class SiteManifest(BaseModel):
    """Persisted description of a hosted site."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    files: list[FileEntry]
    entry_point: str = Field(alias="entryPoint")
    created_at: datetime = Field(alias="createdAt")
    url: str
    direct_url: str = Field(alias="directUrl")


class UploadedFile(BaseModel):
    """File summary returned by the upload endpoint."""
    name: str
    type: str
    size: int
    url: str


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    site: SiteManifest
    files: list[UploadedFile]


class SiteList(BaseModel):
    sites: list[SiteManifest]
