"""Shared fixtures for core unit tests"""

from pathlib import Path

import pytest

from mdblog.core.parse import parse_file


@pytest.fixture(name="parse_text")
def parse_text_fixture(tmp_path):
    """Write text to root/rel and parse it; returns the ParsedDoc."""
    root = tmp_path / "site"

    def _parse(rel: str, text: str):
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return parse_file(path, root)

    return _parse


@pytest.fixture(name="site_root")
def site_root_fixture(tmp_path) -> Path:
    return tmp_path / "site"
