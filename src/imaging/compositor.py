"""Deck and banlist image generation.

A render is planned up front (title overlays plus one tile job per card),
the tile jobs run on a bounded thread pool, and the canvas is assembled in a
single pass in plan order. Completion order of the workers never affects the
output.

A tile job that raises is logged and its tile is left out; the rest of the
image is still produced.
"""

import io
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Optional, Sequence

from PIL import Image

from config.settings import DeckImageSettings, settings as default_settings
from core.logging import get_logger, log_operation
from deck.models import BanlistForImage, DeckForImage, Restriction
from imaging.layout import GridLayout, Placement
from imaging.overlays import (
    CATEGORY_COLORS,
    TITLE_COLOR,
    Overlay,
    apply_overlay,
    badge_for,
    border_for,
    new_marker_for,
    rasterize,
    title_for,
)
from imaging.resolver import CardImageResolver

logger = get_logger(__name__)

OUTPUT_FORMAT = "PNG"


@dataclass
class TileJob:
    """One card tile: where it goes and what is drawn on top of it."""

    card_id: int
    placement: Placement
    overlays: list[Overlay] = field(default_factory=list)


@dataclass
class RenderPlan:
    """Everything needed to paint one canvas."""

    width: int
    height: int
    titles: list[Overlay] = field(default_factory=list)
    tiles: list[TileJob] = field(default_factory=list)


class DeckImageGenerator:
    """Renders deck and banlist images.

    Args:
        config: Geometry, visuals and concurrency settings
        resolver: Tile source; a generator owns a fresh resolver (and so a
            fresh memory cache) unless one is passed in
        max_workers: Tile worker threads (defaults to ``max_tile_workers``)
    """

    def __init__(
        self,
        config: Optional[DeckImageSettings] = None,
        resolver: Optional[CardImageResolver] = None,
        max_workers: Optional[int] = None,
    ):
        self.config = config or default_settings
        self.layout = GridLayout(self.config)
        self.resolver = (
            resolver if resolver is not None else CardImageResolver(self.config)
        )
        self.max_workers = max_workers or self.config.max_tile_workers

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def _title(self, text: str, x: int, y: int, size: int, color=TITLE_COLOR) -> Overlay:
        overlay = title_for(text, self.layout.canvas_width - x, size, color)
        overlay.left = x
        overlay.top = y
        return overlay

    def plan_deck(
        self, deck: DeckForImage, banlist: Optional[BanlistForImage] = None
    ) -> RenderPlan:
        """Lay out a deck: main, extra and side sections, badges from ``banlist``."""
        c = self.config
        sections = deck.sections()
        counts = [len(ids) for _, ids in sections]
        plan = RenderPlan(
            width=self.layout.canvas_width, height=self.layout.total_height(*counts)
        )

        for section in self.layout.plan_sections(counts):
            title, card_ids = sections[section.index]
            plan.titles.append(
                self._title(
                    f"{title} ({len(card_ids)})",
                    section.title_x,
                    section.title_y,
                    c.title_font_size,
                )
            )
            for card_id, placement in zip(card_ids, section.placements):
                job = TileJob(card_id, placement)
                if banlist is not None:
                    badge = badge_for(banlist.restriction_of(card_id), c.tile_width, c)
                    if badge is not None:
                        job.overlays.append(badge)
                plan.tiles.append(job)

        return plan

    def plan_banlist(
        self,
        banlist: BanlistForImage,
        session_number: int,
        previous: Optional[BanlistForImage] = None,
    ) -> RenderPlan:
        """Lay out a banlist: one bordered section per category under a main title.

        Tiles missing from ``previous``'s same category get a NEW tag. Without
        a previous snapshot nothing is tagged.
        """
        c = self.config
        categories = list(Restriction)
        counts = [len(banlist.cards_in(r)) for r in categories]
        band = c.banlist_title_height
        plan = RenderPlan(
            width=self.layout.canvas_width,
            height=self.layout.total_height(*counts, title_band=band),
        )
        plan.titles.append(
            self._title(
                f"Session {session_number} Banlist",
                c.horizontal_padding,
                c.top_padding,
                c.banlist_title_font_size,
            )
        )

        for section in self.layout.plan_sections(counts, title_band=band):
            restriction = categories[section.index]
            card_ids = banlist.cards_in(restriction)
            color = CATEGORY_COLORS[restriction]
            fresh = (
                banlist.newly_added(restriction, previous)
                if previous is not None
                else frozenset()
            )
            plan.titles.append(
                self._title(
                    f"{restriction.label} ({len(card_ids)})",
                    section.title_x,
                    section.title_y,
                    c.banlist_section_font_size,
                    color,
                )
            )
            for card_id, placement in zip(card_ids, section.placements):
                job = TileJob(card_id, placement)
                job.overlays.append(
                    border_for(color, c.tile_width, c.tile_height, c.border_width)
                )
                if card_id in fresh:
                    job.overlays.append(
                        new_marker_for(c.tile_width, c.tile_height, c.badge_inset)
                    )
                plan.tiles.append(job)

        return plan

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def _build_tile(self, job: TileJob) -> Image.Image:
        placement = job.placement
        tile = self.resolver.resolve(job.card_id, placement.width, placement.height)
        for overlay in job.overlays:
            tile = apply_overlay(tile, overlay, self.config.font_path)
        return tile

    def _build_tiles(self, jobs: Sequence[TileJob]) -> dict[int, Image.Image]:
        """Resolve every tile concurrently; failed jobs are absent from the result."""
        tiles: dict[int, Image.Image] = {}
        if not jobs:
            return tiles

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._build_tile, job): index
                for index, job in enumerate(jobs)
            }
            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    tiles[index] = future.result()
                except Exception as e:
                    logger.warning(
                        "Omitting tile for card {}: {}", jobs[index].card_id, e
                    )
        return tiles

    def paint(self, plan: RenderPlan) -> Image.Image:
        """Composite a plan onto a fresh canvas."""
        tiles = self._build_tiles(plan.tiles)

        canvas = Image.new(
            "RGBA", (plan.width, plan.height), self.config.background_color
        )
        for overlay in plan.titles:
            canvas.alpha_composite(
                rasterize(overlay, self.config.font_path),
                dest=(overlay.left, overlay.top),
            )
        for index, job in enumerate(plan.tiles):
            tile = tiles.get(index)
            if tile is not None:
                if tile.mode != "RGBA":
                    tile = tile.convert("RGBA")
                canvas.alpha_composite(tile, dest=(job.placement.x, job.placement.y))

        if len(tiles) < len(plan.tiles):
            logger.warning(
                "{} of {} tiles omitted", len(plan.tiles) - len(tiles), len(plan.tiles)
            )
        return canvas

    @staticmethod
    def encode(canvas: Image.Image) -> bytes:
        buffer = io.BytesIO()
        canvas.convert("RGB").save(buffer, format=OUTPUT_FORMAT, optimize=True)
        return buffer.getvalue()

    def render_deck(
        self, deck: DeckForImage, banlist: Optional[BanlistForImage] = None
    ) -> bytes:
        """Render a deck to PNG bytes."""
        with log_operation("Rendering deck image", cards=deck.total_cards):
            return self.encode(self.paint(self.plan_deck(deck, banlist)))

    def render_banlist(
        self,
        banlist: BanlistForImage,
        session_number: int,
        previous: Optional[BanlistForImage] = None,
    ) -> bytes:
        """Render a session's banlist to PNG bytes."""
        with log_operation("Rendering banlist image", session=session_number):
            plan = self.plan_banlist(banlist, session_number, previous)
            return self.encode(self.paint(plan))
