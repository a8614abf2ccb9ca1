"""Pytest configuration and fixtures."""

import pytest

from avi_factory import sample_avi
from infoavi import config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user config files and INFOAVI_* variables out of the tests."""
    monkeypatch.setattr(config, "CONFIG_LOCATIONS", [])
    for key in ("ITEM_LIMIT", "MAX_DEPTH", "TRACE"):
        monkeypatch.delenv(f"INFOAVI_{key}", raising=False)
    config.reset_config()
    yield
    config.reset_config()


@pytest.fixture
def sample_bytes() -> bytes:
    """A small valid AVI file."""
    return sample_avi()


@pytest.fixture
def sample_file(tmp_path, sample_bytes) -> str:
    """Path of a small valid AVI file on disk."""
    path = tmp_path / "sample.avi"
    path.write_bytes(sample_bytes)
    return str(path)
