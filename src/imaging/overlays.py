"""Overlay graphics drawn on top of tiles and the canvas.

An overlay is a small list of shape and text primitives with a position
relative to whatever it is laid over. Building an overlay is pure; turning it
into pixels is the job of :func:`rasterize`, which targets Pillow. Another
backend only has to understand the four primitives below.
"""

import math
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from config.settings import DeckImageSettings, settings as default_settings
from deck.models import Restriction
from errors import ConfigurationError

Color = Union[str, tuple[int, ...]]

# Badge colors per restriction level
CATEGORY_COLORS = {
    Restriction.BANNED: "#DC143C",  # crimson
    Restriction.LIMITED: "#FFD700",  # gold
    Restriction.SEMILIMITED: "#FF8C00",  # dark orange
    Restriction.UNLIMITED: "#32CD32",  # lime green
}

BADGE_GLYPHS = {
    Restriction.LIMITED: "1",
    Restriction.SEMILIMITED: "2",
}

NEW_MARKER_COLOR = "#1E90FF"
TITLE_COLOR = "#ffffff"

# Draw at this multiple of the target size, then downsample for smooth edges
SUPERSAMPLE = 4


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: Optional[Color] = None
    outline: Optional[Color] = None
    width: float = 1


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color = "#000000"
    width: float = 1


@dataclass(frozen=True)
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: Optional[Color] = None
    outline: Optional[Color] = None
    width: float = 1


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: Color = "#000000"
    size: int = 12
    anchor: str = "la"  # Pillow anchor codes: "la" top-left, "mm" centred


Shape = Union[Circle, Line, Rect, Text]


@dataclass
class Overlay:
    """A drawable of ``width`` x ``height`` placed at (left, top) of its target."""

    width: int
    height: int
    shapes: list[Shape] = field(default_factory=list)
    left: int = 0
    top: int = 0


def badge_for(
    restriction: Optional[Restriction],
    tile_width: int,
    config: Optional[DeckImageSettings] = None,
) -> Optional[Overlay]:
    """Badge for a deck tile, or None when the card is unrestricted.

    Banned cards get a "forbidden" glyph (ring and diagonal slash on white),
    limited and semi-limited cards a filled circle holding "1" or "2".
    The badge sits in the tile's top-left corner, inset by a few pixels.
    """
    config = config or default_settings
    if restriction is None or restriction is Restriction.UNLIMITED:
        return None

    size = max(8, math.floor(tile_width * config.badge_ratio))
    radius = size / 2
    color = CATEGORY_COLORS[restriction]
    overlay = Overlay(width=size, height=size, left=config.badge_inset, top=config.badge_inset)

    if restriction is Restriction.BANNED:
        stroke = max(2.0, size / 10)
        inner = radius - stroke
        reach = inner * math.sqrt(0.5)
        overlay.shapes = [
            Circle(radius, radius, radius - 0.5, fill="#ffffff", outline="#000000", width=0.5),
            Circle(radius, radius, inner, outline=color, width=stroke),
            Line(radius - reach, radius + reach, radius + reach, radius - reach, color, stroke),
        ]
        return overlay

    overlay.shapes = [
        Circle(radius, radius, radius - 0.5, fill=color, outline="#000000", width=0.5),
        Text(radius, radius, BADGE_GLYPHS[restriction], "#000000", math.floor(size * 0.65), "mm"),
    ]
    return overlay


def border_for(color: Color, width: int, height: int, stroke: int) -> Overlay:
    """Rectangular frame drawn just inside a tile's edges."""
    return Overlay(
        width=width,
        height=height,
        shapes=[Rect(0, 0, width - 1, height - 1, outline=color, width=stroke)],
    )


def new_marker_for(tile_width: int, tile_height: int, inset: int = 2) -> Overlay:
    """Tag reading NEW for the top-right corner of a banlist tile.

    Never wider than the tile, so it stays inside it even on tiny tiles.
    """
    width = min(max(16, math.floor(tile_width * 0.45)), max(1, tile_width - inset))
    height = max(8, math.floor(tile_height * 0.14))
    return Overlay(
        width=width,
        height=height,
        left=max(0, tile_width - width - inset),
        top=inset,
        shapes=[
            Rect(0, 0, width - 1, height - 1, fill=NEW_MARKER_COLOR, outline="#ffffff", width=1),
            Text(width / 2, height / 2, "NEW", "#ffffff", math.floor(height * 0.75), "mm"),
        ],
    )


def title_for(text: str, width: int, font_size: int, color: Color = TITLE_COLOR) -> Overlay:
    """Single line of title text, anchored at its top-left corner."""
    return Overlay(
        width=width,
        height=font_size + 10,
        shapes=[Text(0, 0, text, color, font_size, "la")],
    )


@lru_cache(maxsize=64)
def load_font(size: int, font_path: Optional[Path] = None):
    """TrueType font at ``size`` px; Pillow's bundled font when no path is set."""
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size)
        except OSError as error:
            raise ConfigurationError(f"Cannot load font {font_path}: {error}") from error
    return ImageFont.load_default(size=size)


def rasterize(overlay: Overlay, font_path: Optional[Path] = None) -> Image.Image:
    """Render an overlay to a transparent RGBA image of its own size."""
    s = SUPERSAMPLE
    canvas = Image.new("RGBA", (overlay.width * s, overlay.height * s), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)

    for shape in overlay.shapes:
        if isinstance(shape, Circle):
            draw.ellipse(
                [
                    (shape.cx - shape.r) * s,
                    (shape.cy - shape.r) * s,
                    (shape.cx + shape.r) * s,
                    (shape.cy + shape.r) * s,
                ],
                fill=shape.fill,
                outline=shape.outline,
                width=max(1, round(shape.width * s)),
            )
        elif isinstance(shape, Line):
            line_width = max(1, round(shape.width * s))
            draw.line(
                [shape.x1 * s, shape.y1 * s, shape.x2 * s, shape.y2 * s],
                fill=shape.color,
                width=line_width,
            )
            # round caps
            cap = line_width / 2
            for x, y in ((shape.x1 * s, shape.y1 * s), (shape.x2 * s, shape.y2 * s)):
                draw.ellipse([x - cap, y - cap, x + cap, y + cap], fill=shape.color)
        elif isinstance(shape, Rect):
            draw.rectangle(
                [shape.x0 * s, shape.y0 * s, (shape.x1 + 1) * s - 1, (shape.y1 + 1) * s - 1],
                fill=shape.fill,
                outline=shape.outline,
                width=max(1, round(shape.width * s)),
            )
        elif isinstance(shape, Text):
            font = load_font(max(1, shape.size * s), font_path)
            draw.text(
                (shape.x * s, shape.y * s),
                shape.text,
                fill=shape.color,
                font=font,
                anchor=shape.anchor if isinstance(font, ImageFont.FreeTypeFont) else None,
            )
        else:
            raise TypeError(f"Unsupported overlay shape: {type(shape).__name__}")

    return canvas.resize((overlay.width, overlay.height), Image.Resampling.LANCZOS)


def apply_overlay(
    target: Image.Image, overlay: Overlay, font_path: Optional[Path] = None
) -> Image.Image:
    """Composite an overlay onto a copy of ``target`` without changing its size."""
    result = target.convert("RGBA") if target.mode != "RGBA" else target.copy()
    layer = rasterize(overlay, font_path)
    # Overlays hanging over the edge are clipped to the target
    visible_width = min(layer.width, result.width - overlay.left)
    visible_height = min(layer.height, result.height - overlay.top)
    if visible_width <= 0 or visible_height <= 0:
        return result
    result.alpha_composite(
        layer.crop((0, 0, visible_width, visible_height)),
        dest=(overlay.left, overlay.top),
    )
    return result
