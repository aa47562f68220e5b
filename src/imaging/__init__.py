"""Card-grid image rendering: layout, tile resolution, overlays and compositing."""

from imaging.compositor import DeckImageGenerator
from imaging.layout import GridLayout, Placement
from imaging.resolver import CardImageResolver

__all__ = [
    "CardImageResolver",
    "DeckImageGenerator",
    "GridLayout",
    "Placement",
]
