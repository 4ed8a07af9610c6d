"""Tests for extension-based content type classification."""

import pytest

from zipsites.services.mime import DEFAULT_CONTENT_TYPE, get_mime_type, is_html_type


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("index.html", "text/html"),
        ("legacy.HTM", "text/html"),
        ("css/site.css", "text/css"),
        ("app.js", "application/javascript"),
        ("data.json", "application/json"),
        ("logo.PNG", "image/png"),
        ("photo.jpeg", "image/jpeg"),
        ("icon.svg", "image/svg+xml"),
        ("fonts/inter.woff2", "font/woff2"),
        ("archive.tar.zip", "application/zip"),
    ],
)
def test_known_extensions(filename, expected):
    assert get_mime_type(filename) == expected


def test_unknown_extension_is_binary():
    assert get_mime_type("blob.xyz") == DEFAULT_CONTENT_TYPE
    assert get_mime_type("README") == DEFAULT_CONTENT_TYPE


def test_same_extension_same_type():
    assert get_mime_type("a/b/page.html") == get_mime_type("other.html")


def test_is_html_type():
    assert is_html_type("text/html")
    assert not is_html_type("text/css")
