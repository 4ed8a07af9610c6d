"""Tests for settings parsing."""

from pathlib import Path

from zipsites.config import Settings


def test_comma_separated_lists_are_split():
    s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
    assert s.cors_origins == ["http://a.test", "http://b.test"]


def test_relative_paths_become_absolute():
    s = Settings(_env_file=None, blob_dir="./data/blobs")
    assert Path(s.blob_dir).is_absolute()
    assert Path(s.database_path).is_absolute()


def test_only_used_directories_are_configured():
    assert "log_dir" not in Settings.model_fields
    assert {"data_dir", "blob_dir", "database_path"} <= set(Settings.model_fields)
