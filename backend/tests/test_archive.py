"""Tests for ZIP extraction into the site store."""

import io
import zipfile
from unittest.mock import AsyncMock

import pytest

from zipsites.services.archive import ArchiveExtractor, normalize_member_name, site_key
from zipsites.services.errors import DecodeError, StoreWriteError, UnsafeArchivePathError
from zipsites.services.site_store import DatabaseSiteStore


@pytest.mark.asyncio
async def test_one_entry_per_file_member(store, make_archive):
    archive = make_archive(
        {
            "index.html": "<h1>Home</h1>",
            "css/site.css": "body {}",
            "img/logo.png": b"\x89PNG\r\n",
        },
        dirs=("css/", "img/"),
    )

    files = await ArchiveExtractor(store).extract(archive, "site0001")

    assert [f.name for f in files] == ["index.html", "css/site.css", "img/logo.png"]
    assert all(not f.name.endswith("/") for f in files)
    assert files[1].type == "text/css"
    assert files[2].type == "image/png"
    assert files[2].path == "sites/site0001/img/logo.png"
    assert files[2].size == 6


@pytest.mark.asyncio
async def test_stored_objects_match_entries(store, make_archive):
    archive = make_archive({"index.html": "<p>hello</p>", "app.js": "console.log(1)"})

    files = await ArchiveExtractor(store).extract(archive, "site0002")

    for entry in files:
        obj = await store.get(entry.path)
        assert obj is not None
        assert len(obj.body) == entry.size
        assert obj.content_type == entry.type


@pytest.mark.asyncio
async def test_directory_only_archive_yields_nothing(store, make_archive):
    archive = make_archive({}, dirs=("empty/",))
    assert await ArchiveExtractor(store).extract(archive, "site0003") == []


@pytest.mark.asyncio
async def test_not_a_zip_raises_decode_error(store):
    with pytest.raises(DecodeError):
        await ArchiveExtractor(store).extract(b"this is not a zip", "site0004")


@pytest.mark.asyncio
async def test_corrupt_member_raises_decode_error(store):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_STORED) as zf:
        zf.writestr("index.html", b"A" * 64)
    data = bytearray(buf.getvalue())
    # Flip a byte of the stored member body so the CRC check fails
    body_offset = data.index(b"A" * 64)
    data[body_offset] = ord("B")

    with pytest.raises(DecodeError):
        await ArchiveExtractor(store).extract(bytes(data), "site0005")


@pytest.mark.asyncio
async def test_traversal_member_rejected(store, make_archive):
    archive = make_archive({"../escape.html": "x"})
    with pytest.raises(UnsafeArchivePathError):
        await ArchiveExtractor(store).extract(archive, "site0006")


@pytest.mark.asyncio
async def test_write_failure_keeps_earlier_files(db_session, tmp_path, make_archive):
    store = DatabaseSiteStore(db_session, tmp_path / "blobs", max_object_bytes=10)
    archive = make_archive({"a.txt": "small", "b.txt": "much too large for the quota"})

    with pytest.raises(StoreWriteError):
        await ArchiveExtractor(store).extract(archive, "site0007")

    assert await store.list("sites/site0007/") == ["sites/site0007/a.txt"]


@pytest.mark.asyncio
async def test_store_fault_propagates(make_archive):
    store = AsyncMock()
    store.put.side_effect = StoreWriteError("backend down")

    with pytest.raises(StoreWriteError):
        await ArchiveExtractor(store).extract(make_archive({"index.html": "x"}), "site0008")


class TestNormalizeMemberName:
    def test_plain_and_nested(self):
        assert normalize_member_name("index.html") == "index.html"
        assert normalize_member_name("assets/js/app.js") == "assets/js/app.js"

    def test_cleans_separators(self):
        assert normalize_member_name("./site\\css\\a.css") == "site/css/a.css"
        assert normalize_member_name("a//b/./c.txt") == "a/b/c.txt"

    @pytest.mark.parametrize("name", ["/etc/passwd", "C:\\boot.ini", "a/../../b", "..", "./"])
    def test_rejects_unsafe(self, name):
        with pytest.raises(UnsafeArchivePathError):
            normalize_member_name(name)


def test_site_key():
    assert site_key("abc", "css/a.css") == "sites/abc/css/a.css"
