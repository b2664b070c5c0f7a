"""Shared fixtures for the conversion pipeline tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.Lib.Conversion.DebugKeystore import DebugKeystore


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def debug_keystore(tmp_path: Path) -> DebugKeystore:
    path = tmp_path / "debug.keystore"
    path.write_bytes(b"keystore")
    keystore = DebugKeystore(str(path))
    assert keystore.ensure()
    return keystore
