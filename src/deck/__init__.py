"""Deck and banlist inputs for the image renderers."""

from deck.models import BanlistForImage, DeckForImage, Restriction
from deck.ydk import load_deck, parse_ydk, parse_ydke

__all__ = [
    "BanlistForImage",
    "DeckForImage",
    "Restriction",
    "load_deck",
    "parse_ydk",
    "parse_ydke",
]
