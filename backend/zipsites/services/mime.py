"""Extension-based content type classification.

Content is never sniffed: the same file name always maps to the same type,
both when an archive is extracted and when the file is served back.
"""

from __future__ import annotations

DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES: dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "json": "application/json",
    "map": "application/json",
    "webmanifest": "application/manifest+json",
    "xml": "application/xml",
    "txt": "text/plain",
    "md": "text/markdown",
    "csv": "text/csv",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "avif": "image/avif",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "wasm": "application/wasm",
    "pdf": "application/pdf",
    "zip": "application/zip",
}


def get_mime_type(filename: str) -> str:
    """Map a file name to a content type by its last extension."""
    ext = filename.rsplit(".", 1)[-1].lower()
    return MIME_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def is_html_type(content_type: str) -> bool:
    return "html" in content_type
