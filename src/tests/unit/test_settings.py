"""Unit tests for config/settings.py"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_settings_import():
    """Test that settings module imports successfully."""
    from config.settings import DeckImageSettings, settings

    assert settings is not None
    assert isinstance(settings, DeckImageSettings)


def test_settings_geometry_defaults():
    """Default geometry matches the published grid."""
    from config.settings import DeckImageSettings

    s = DeckImageSettings()

    assert (s.tile_width, s.tile_height) == (81, 118)
    assert s.tile_spacing == 4
    assert s.columns_per_row == 10
    assert s.overlap_factor == pytest.approx(0.15)
    assert s.background_color == "#2d2d30"


def test_settings_source_defaults():
    """Test default card art sources and output paths."""
    from config.settings import DeckImageSettings

    s = DeckImageSettings()

    assert s.card_image_dir == Path("/app/card-images")
    assert s.remote_base_url == "https://images.ygoprodeck.com/images/cards_small"
    assert s.placeholder_url.endswith("/cards/0.jpg")
    assert s.public_root == Path("public")
    assert s.cache_downloads is False


def test_settings_env_var_override(monkeypatch):
    """Test that environment variables override defaults."""
    monkeypatch.setenv("DECKIMG_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DECKIMG_MAX_TILE_WORKERS", "16")
    monkeypatch.setenv("DECKIMG_COLUMNS_PER_ROW", "8")

    from config.settings import DeckImageSettings

    s = DeckImageSettings()

    assert s.log_level == "DEBUG"
    assert s.max_tile_workers == 16
    assert s.columns_per_row == 8


def test_reload_settings_rebinds_module_instance(monkeypatch):
    """reload_settings() picks up new environment values."""
    import config.settings

    original = config.settings.settings
    monkeypatch.setenv("DECKIMG_TILE_SPACING", "6")
    try:
        reloaded = config.settings.reload_settings()
        assert reloaded.tile_spacing == 6
        assert config.settings.settings is reloaded
    finally:
        config.settings.settings = original


def test_settings_validation():
    """Test that settings validation works."""
    from config.settings import DeckImageSettings

    valid = DeckImageSettings(max_tile_workers=10, log_level="WARNING")
    assert valid.max_tile_workers == 10

    with pytest.raises(ValidationError):
        DeckImageSettings(max_tile_workers=100)

    with pytest.raises(ValidationError):
        DeckImageSettings(log_level="INVALID")


def test_settings_geometry_validation():
    """Nonsensical geometry is rejected at construction time."""
    from config.settings import DeckImageSettings

    with pytest.raises(ValidationError):
        DeckImageSettings(columns_per_row=0)

    with pytest.raises(ValidationError):
        DeckImageSettings(overlap_factor=1.0)

    with pytest.raises(ValidationError):
        DeckImageSettings(tile_spacing=-1)


def test_settings_strips_trailing_slash():
    """URL templates always join with a single slash."""
    from config.settings import DeckImageSettings

    s = DeckImageSettings(remote_base_url="https://cdn.example.com/cards/")

    assert s.remote_base_url == "https://cdn.example.com/cards"


def test_settings_repr():
    """Test that settings has a useful repr."""
    from config.settings import settings

    repr_str = repr(settings)
    assert "DeckImageSettings" in repr_str
    assert "tile_width" in repr_str
