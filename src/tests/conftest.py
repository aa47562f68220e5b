"""Shared fixtures for the image pipeline tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import DeckImageSettings  # noqa: E402
from tests.helpers import FakeFetch  # noqa: E402


@pytest.fixture
def config(tmp_path):
    """Settings isolated to a temporary directory."""
    return DeckImageSettings(
        card_image_dir=tmp_path / "card-images",
        public_root=tmp_path / "public",
        max_tile_workers=4,
    )


@pytest.fixture
def fake_fetch():
    return FakeFetch()
