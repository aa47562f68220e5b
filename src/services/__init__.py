"""Application-facing services for generating and managing stored images."""

from services.images import (
    RegenerationSummary,
    banlist_image_exists,
    delete_banlist_image,
    delete_deck_image,
    deck_image_exists,
    get_generator,
    public_url,
    regenerate_deck_images,
    save_banlist_image,
    save_deck_image,
)

__all__ = [
    "RegenerationSummary",
    "banlist_image_exists",
    "delete_banlist_image",
    "delete_deck_image",
    "deck_image_exists",
    "get_generator",
    "public_url",
    "regenerate_deck_images",
    "save_banlist_image",
    "save_deck_image",
]
