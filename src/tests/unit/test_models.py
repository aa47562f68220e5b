"""Unit tests for deck/models.py"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from deck.models import BanlistForImage, DeckForImage, Restriction


class TestDeckForImage:
    """Deck value object."""

    def test_sections_in_render_order(self):
        deck = DeckForImage(maindeck=[1, 1, 2], extradeck=[3], sidedeck=[])

        assert deck.sections() == [
            ("Main Deck", (1, 1, 2)),
            ("Extra Deck", (3,)),
            ("Side Deck", ()),
        ]

    def test_duplicates_kept(self):
        deck = DeckForImage(maindeck=[5, 5, 5])

        assert deck.maindeck == (5, 5, 5)
        assert deck.total_cards == 3


class TestBanlistForImage:
    """Banlist membership and precedence."""

    def test_restriction_lookup(self):
        banlist = BanlistForImage(banned=[1], limited=[2], semilimited=[3], unlimited=[4])

        assert banlist.restriction_of(1) is Restriction.BANNED
        assert banlist.restriction_of(2) is Restriction.LIMITED
        assert banlist.restriction_of(3) is Restriction.SEMILIMITED
        assert banlist.restriction_of(4) is None
        assert banlist.restriction_of(99) is None

    def test_card_listed_twice_gets_one_category(self):
        banlist = BanlistForImage(banned=[7], limited=[7])

        assert banlist.restriction_of(7) is Restriction.BANNED

    def test_categories_deduplicated_in_order(self):
        banlist = BanlistForImage(limited=[9, 3, 9, 1, 3])

        assert banlist.cards_in(Restriction.LIMITED) == (9, 3, 1)
        assert banlist.contains(Restriction.LIMITED, 1)
        assert not banlist.contains(Restriction.BANNED, 1)

    def test_newly_added_is_set_difference(self):
        previous = BanlistForImage(banned=[1, 2], limited=[3])
        current = BanlistForImage(banned=[2, 3], limited=[1])

        assert current.newly_added(Restriction.BANNED, previous) == {3}
        assert current.newly_added(Restriction.LIMITED, previous) == {1}
        assert current.newly_added(Restriction.SEMILIMITED, previous) == set()

    def test_labels(self):
        assert Restriction.SEMILIMITED.label == "Semi-Limited"
        assert Restriction.BANNED.label == "Banned"
