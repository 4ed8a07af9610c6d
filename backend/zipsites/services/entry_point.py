"""Root document selection for an extracted site."""

from __future__ import annotations

from collections.abc import Sequence

from zipsites.schemas.site import FileEntry
from zipsites.services.errors import EmptySiteError
from zipsites.services.mime import is_html_type

ENTRY_POINT_CANDIDATES = (
    "index.html",
    "index.htm",
    "default.html",
    "default.htm",
    "main.html",
)


def resolve_entry_point(files: Sequence[FileEntry]) -> str:
    """Pick the file served at a site's root.

    Known index names win in priority order (matched case-insensitively,
    returned with their stored casing), then the first HTML file in
    extraction order, then simply the first file.
    """
    if not files:
        raise EmptySiteError("Cannot resolve an entry point for a site without files")

    by_lower_name: dict[str, str] = {}
    for entry in files:
        by_lower_name.setdefault(entry.name.lower(), entry.name)

    for candidate in ENTRY_POINT_CANDIDATES:
        if candidate in by_lower_name:
            return by_lower_name[candidate]

    for entry in files:
        if is_html_type(entry.type) or entry.name.endswith(".html"):
            return entry.name

    return files[0].name
