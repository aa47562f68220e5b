"""Deck and banlist structures consumed by the image renderers.

Both are plain value objects supplied by the surrounding application. Nothing
here checks deck legality: a banlist only decides which badge a tile gets.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class Restriction(str, Enum):
    """Banlist categories, in badge precedence order."""

    BANNED = "banned"
    LIMITED = "limited"
    SEMILIMITED = "semilimited"
    UNLIMITED = "unlimited"

    @property
    def label(self) -> str:
        return _RESTRICTION_LABELS[self]


_RESTRICTION_LABELS = {
    Restriction.BANNED: "Banned",
    Restriction.LIMITED: "Limited",
    Restriction.SEMILIMITED: "Semi-Limited",
    Restriction.UNLIMITED: "Unlimited",
}

# Categories that put a badge on a deck tile
RESTRICTED = (Restriction.BANNED, Restriction.LIMITED, Restriction.SEMILIMITED)


def _unique(card_ids: Iterable[int]) -> tuple[int, ...]:
    """Drop repeated ids while keeping first-seen order."""
    return tuple(dict.fromkeys(card_ids))


@dataclass(frozen=True)
class DeckForImage:
    """Three ordered card id sequences. Duplicates are copies of a card."""

    maindeck: tuple[int, ...] = ()
    extradeck: tuple[int, ...] = ()
    sidedeck: tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "maindeck", tuple(self.maindeck))
        object.__setattr__(self, "extradeck", tuple(self.extradeck))
        object.__setattr__(self, "sidedeck", tuple(self.sidedeck))

    def sections(self) -> list[tuple[str, tuple[int, ...]]]:
        """Deck sections in render order with their display titles."""
        return [
            ("Main Deck", self.maindeck),
            ("Extra Deck", self.extradeck),
            ("Side Deck", self.sidedeck),
        ]

    @property
    def total_cards(self) -> int:
        return len(self.maindeck) + len(self.extradeck) + len(self.sidedeck)


@dataclass(frozen=True)
class BanlistForImage:
    """Card ids per restriction category.

    Each category is stored as an ordered tuple of unique ids so that a
    banlist image lays tiles out in the caller's order; membership checks go
    through the frozen sets built alongside.
    """

    banned: tuple[int, ...] = ()
    limited: tuple[int, ...] = ()
    semilimited: tuple[int, ...] = ()
    unlimited: tuple[int, ...] = ()
    _members: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        members = {}
        for restriction in Restriction:
            ids = _unique(getattr(self, restriction.value))
            object.__setattr__(self, restriction.value, ids)
            members[restriction] = frozenset(ids)
        object.__setattr__(self, "_members", members)

    def cards_in(self, restriction: Restriction) -> tuple[int, ...]:
        return getattr(self, restriction.value)

    def contains(self, restriction: Restriction, card_id: int) -> bool:
        return card_id in self._members[restriction]

    def restriction_of(self, card_id: int) -> Optional[Restriction]:
        """Badge category for a deck tile.

        Returns the first of banned, limited, semi-limited that lists the card,
        so a card can never carry two badges even if a caller lists it twice.
        Unlimited cards get no badge.
        """
        for restriction in RESTRICTED:
            if card_id in self._members[restriction]:
                return restriction
        return None

    def newly_added(self, restriction: Restriction, previous: "BanlistForImage") -> frozenset:
        """Ids in this category that were not in the same category of ``previous``."""
        return self._members[restriction] - previous._members[restriction]
