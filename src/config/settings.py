"""
Configuration management for deck and banlist image generation.

Uses Pydantic for type-safe, validated configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class DeckImageSettings(BaseSettings):
    """Main configuration for the card-grid renderer.

    Settings can be overridden via:
    1. Environment variables (prefixed with DECKIMG_)
    2. .env file in project root
    3. Programmatic overrides

    Example:
        export DECKIMG_MAX_TILE_WORKERS=16
        export DECKIMG_CARD_IMAGE_DIR=/srv/card-images
    """

    # === Tile geometry ===
    tile_width: int = Field(
        default=81, ge=8, le=1000, description="Width of one card tile in pixels"
    )
    tile_height: int = Field(
        default=118, ge=8, le=1500, description="Height of one card tile in pixels"
    )
    tile_spacing: int = Field(
        default=4, ge=0, le=100, description="Gap between tile columns and rows"
    )
    columns_per_row: int = Field(
        default=10, ge=1, le=40, description="Tiles per grid row"
    )
    overlap_factor: float = Field(
        default=0.15,
        ge=0.0,
        lt=1.0,
        description="Horizontal overlap for the dense grid mode (0-1)",
    )

    # === Canvas geometry ===
    horizontal_padding: int = Field(
        default=50, ge=0, le=500, description="Left and right canvas margin"
    )
    top_padding: int = Field(default=50, ge=0, le=500, description="Top margin")
    bottom_padding: int = Field(
        default=50, ge=0, le=500, description="Bottom margin"
    )
    section_header_height: int = Field(
        default=60,
        ge=0,
        le=500,
        description="Vertical space reserved per section for its title",
    )
    section_title_offset: int = Field(
        default=30,
        ge=0,
        le=500,
        description="Distance from a section title to its first tile row",
    )
    banlist_title_height: int = Field(
        default=50,
        ge=0,
        le=500,
        description="Extra top band holding the banlist image title",
    )

    # === Visuals ===
    background_color: str = Field(
        default="#2d2d30", description="Canvas background color"
    )
    title_font_size: int = Field(default=20, ge=6, le=200)
    banlist_title_font_size: int = Field(default=28, ge=6, le=200)
    banlist_section_font_size: int = Field(default=22, ge=6, le=200)
    font_path: Optional[Path] = Field(
        default=None,
        description="TrueType font for titles and badges (Pillow default if unset)",
    )
    badge_ratio: float = Field(
        default=0.30, gt=0.0, le=1.0, description="Badge size relative to tile width"
    )
    badge_inset: int = Field(default=2, ge=0, le=50)
    border_width: int = Field(default=3, ge=1, le=20)

    # === Card art sources ===
    card_image_dir: Path = Field(
        default=Path("/app/card-images"),
        description="Local card art store, one {card_id}.jpg per card",
    )
    remote_base_url: str = Field(
        default="https://images.ygoprodeck.com/images/cards_small",
        description="Remote card art endpoint, fetched as {base}/{card_id}.jpg",
    )
    placeholder_url: str = Field(
        default="https://images.ygoprodeck.com/images/cards/0.jpg",
        description="Neutral card back used when no art can be found",
    )
    cache_downloads: bool = Field(
        default=False, description="Write remote hits back into the local store"
    )

    # === Threading & HTTP ===
    max_tile_workers: int = Field(
        default=8,
        ge=1,
        le=32,
        description="Number of concurrent tile resolution threads",
    )
    http_timeout: int = Field(
        default=10, ge=1, le=300, description="HTTP request timeout in seconds"
    )
    http_max_retries: int = Field(
        default=2, ge=1, le=10, description="Attempts per remote request"
    )
    user_agent: str = Field(default="DeckImages/1.0")

    # === Output ===
    public_root: Path = Field(
        default=Path("public"),
        description="Web root that receives deck-images/ and banlist-images/",
    )

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_rotation: str = Field(default="10 MB", description="Log file rotation size")
    log_retention: str = Field(
        default="10 days", description="Log file retention period"
    )
    log_to_file: bool = Field(default=False, description="Enable file logging")
    logs_dir: Path = Field(default=Path("logs"), description="Log files directory")

    @field_validator("remote_base_url", "placeholder_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise URLs so templates can always join with a single '/'."""
        return v.rstrip("/")

    model_config = {
        "env_prefix": "DECKIMG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Global settings instance
settings = DeckImageSettings()


def reload_settings() -> DeckImageSettings:
    """Reload settings from environment and .env file.

    Useful for testing or runtime configuration changes.
    """
    global settings
    settings = DeckImageSettings()
    return settings
