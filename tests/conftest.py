from __future__ import annotations

from pathlib import Path

import pytest

from page_digest.core.config import FetchSettings
from page_digest.core.digest import DigestEngine

FIXED_SALT = bytes(range(16))


@pytest.fixture()
def app_dir(tmp_path: Path) -> Path:
    return tmp_path / "app"


@pytest.fixture()
def engine() -> DigestEngine:
    return DigestEngine(salt=FIXED_SALT)


@pytest.fixture()
def fast_settings() -> FetchSettings:
    return FetchSettings(requests_per_second=50.0, burst=3, timeout_seconds=5.0)
