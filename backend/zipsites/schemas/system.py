"""System status schemas."""

from pydantic import BaseModel


class StorageStatus(BaseModel):
    """Object store and disk usage."""
    object_count: int
    stored_bytes: int
    blob_bytes: int
    site_count: int
    disk_total_gb: float
    disk_used_gb: float
    disk_percent: float


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    service: str = "zipsites"
