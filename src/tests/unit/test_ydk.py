"""Unit tests for deck/ydk.py"""

import base64
import struct
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from deck.ydk import DeckFormat, detect_format, load_deck, parse_ydk, parse_ydke
from errors import DeckParsingError


def _encode(ids):
    return base64.b64encode(struct.pack(f"<{len(ids)}I", *ids)).decode("ascii")


YDK_TEXT = """#created by a deck editor
#main
89631139
89631139
46986414
#extra
44508094
!side
14558127
"""


class TestParseYdk:
    """YDK text parsing."""

    def test_sections(self):
        deck = parse_ydk(YDK_TEXT)

        assert deck.maindeck == (89631139, 89631139, 46986414)
        assert deck.extradeck == (44508094,)
        assert deck.sidedeck == (14558127,)

    def test_invalid_lines_skipped(self):
        deck = parse_ydk("#main\n123\nnot-a-card\n0\n\n456\n")

        assert deck.maindeck == (123, 456)

    def test_ids_before_header_ignored(self):
        deck = parse_ydk("111\n#main\n222\n")

        assert deck.maindeck == (222,)


class TestParseYdke:
    """ydke:// URL parsing."""

    def test_decodes_sections(self):
        url = f"ydke://{_encode([89631139, 46986414])}!{_encode([44508094])}!!"

        deck = parse_ydke(url)

        assert deck.maindeck == (89631139, 46986414)
        assert deck.extradeck == (44508094,)
        assert deck.sidedeck == ()

    def test_wrong_prefix(self):
        with pytest.raises(DeckParsingError):
            parse_ydke("https://example.com/deck")

    def test_wrong_component_count(self):
        with pytest.raises(DeckParsingError):
            parse_ydke(f"ydke://{_encode([1])}!")

    def test_bad_base64(self):
        with pytest.raises(DeckParsingError):
            parse_ydke("ydke://@@@!!!")

    def test_truncated_id(self):
        truncated = base64.b64encode(b"\x01\x02\x03").decode("ascii")
        with pytest.raises(DeckParsingError):
            parse_ydke(f"ydke://{truncated}!!!")


class TestLoadDeck:
    """Format detection and file loading."""

    def test_detect_format(self):
        assert detect_format("ydke://!!!") is DeckFormat.YDKE
        assert detect_format("#main\n1\n") is DeckFormat.YDK

    def test_load_ydk_file(self, tmp_path):
        path = tmp_path / "deck.ydk"
        path.write_text(YDK_TEXT, encoding="utf-8")

        assert load_deck(path).extradeck == (44508094,)

    def test_load_ydke_from_text_file(self, tmp_path):
        path = tmp_path / "deck.txt"
        path.write_text(f"ydke://{_encode([5])}!!!\n", encoding="utf-8")

        assert load_deck(path).maindeck == (5,)

    def test_load_ydke_string(self):
        assert load_deck(f"ydke://!{_encode([7])}!!").extradeck == (7,)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DeckParsingError):
            load_deck(tmp_path / "missing.ydk")

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / "deck.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(DeckParsingError):
            load_deck(path)
