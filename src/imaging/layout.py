"""Pure grid arithmetic for card-grid images.

No I/O and no side effects: every function maps counts and settings to
rectangles. Every section of every image uses the same row-major rule: item
``i`` sits at row ``i // columns`` and column ``i % columns``.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from config.settings import DeckImageSettings, settings as default_settings


@dataclass(frozen=True)
class Placement:
    """Target rectangle of one tile on the canvas."""

    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class SectionPlan:
    """Where one non-empty section goes: its title line and its tiles."""

    index: int
    title_x: int
    title_y: int
    placements: list[Placement]
    rows: int


class GridLayout:
    """Fixed-width grid layout driven by the geometry settings."""

    def __init__(self, config: Optional[DeckImageSettings] = None):
        self.config = config or default_settings

    def rows_for(self, count: int) -> int:
        return math.ceil(count / self.config.columns_per_row) if count > 0 else 0

    @property
    def canvas_width(self) -> int:
        """Width of every canvas, independent of how many cards it holds."""
        c = self.config
        return (
            c.columns_per_row * c.tile_width
            + (c.columns_per_row - 1) * c.tile_spacing
            + 2 * c.horizontal_padding
        )

    @property
    def row_height(self) -> int:
        return self.config.tile_height + self.config.tile_spacing

    def column_step(self, overlap: bool = False) -> int:
        """Horizontal distance between the left edges of neighbouring tiles."""
        c = self.config
        if overlap:
            return math.floor(c.tile_width * (1 - c.overlap_factor))
        return c.tile_width + c.tile_spacing

    def place_grid(
        self, count: int, start_x: int, start_y: int, overlap: bool = False
    ) -> tuple[list[Placement], int]:
        """Place ``count`` tiles left-to-right, top-to-bottom.

        Args:
            count: Number of tiles
            start_x: Left edge of the first column
            start_y: Top edge of the first row
            overlap: Dense mode; columns advance by the overlapped tile width
                instead of width plus spacing. Rows are unaffected.

        Returns:
            Tuple of (placements in input order, number of rows used)
        """
        c = self.config
        step_x = self.column_step(overlap)
        placements = [
            Placement(
                x=start_x + (i % c.columns_per_row) * step_x,
                y=start_y + (i // c.columns_per_row) * self.row_height,
                width=c.tile_width,
                height=c.tile_height,
            )
            for i in range(count)
        ]
        return placements, self.rows_for(count)

    def section_height(self, count: int) -> int:
        """Vertical space one section takes; zero when it is empty."""
        if count <= 0:
            return 0
        return self.rows_for(count) * self.row_height + self.config.section_header_height

    def total_height(self, *counts: int, title_band: int = 0) -> int:
        """Canvas height for sections of the given sizes.

        Args:
            counts: Number of cards in each section, in render order
            title_band: Extra space above the first section (banlist title)
        """
        c = self.config
        return (
            c.top_padding
            + title_band
            + sum(self.section_height(n) for n in counts)
            + c.bottom_padding
        )

    def plan_sections(
        self, counts: Sequence[int], title_band: int = 0
    ) -> list[SectionPlan]:
        """Lay out every non-empty section below the previous one.

        Uses the same per-section heights as :meth:`total_height`, so the
        rendered sections and the canvas height always agree.
        """
        c = self.config
        plans = []
        y = c.top_padding + title_band
        for index, count in enumerate(counts):
            if count <= 0:
                continue
            placements, rows = self.place_grid(
                count, c.horizontal_padding, y + c.section_title_offset
            )
            plans.append(
                SectionPlan(
                    index=index,
                    title_x=c.horizontal_padding,
                    title_y=y,
                    placements=placements,
                    rows=rows,
                )
            )
            y += self.section_height(count)
        return plans

