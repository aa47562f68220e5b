"""Deck file loading for Yu-Gi-Oh! deck formats.

Supports:
- YDK files: "#main", "#extra" and "!side" headers, one card id per line
- YDKe URLs: "ydke://<main>!<extra>!<side>!" with base64 encoded uint32 ids

Parsing never checks deck legality; section sizes are whatever the file says.
"""

import base64
import binascii
from enum import Enum
from pathlib import Path
from typing import Union

import numpy as np

from core.logging import get_logger
from deck.models import DeckForImage
from errors import DeckParsingError

logger = get_logger(__name__)

YDKE_PREFIX = "ydke://"

SECTION_HEADERS = {
    "#main": "maindeck",
    "#extra": "extradeck",
    "!side": "sidedeck",
}


class DeckFormat(str, Enum):
    YDKE = "ydke"
    YDK = "ydk"


def parse_ydk(text: str) -> DeckForImage:
    """Parse the contents of a .ydk file.

    Lines before the first section header, other comment lines and anything
    that is not a positive integer are skipped.

    Examples:
        >>> parse_ydk("#main\\n89631139\\n#extra\\n!side\\n14558127\\n")
        DeckForImage(maindeck=(89631139,), extradeck=(), sidedeck=(14558127,))
    """
    sections: dict[str, list[int]] = {name: [] for name in SECTION_HEADERS.values()}
    current_section = None

    for line_num, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped:
            continue

        header = next(
            (h for h in SECTION_HEADERS if stripped.startswith(h)), None
        )
        if header is not None:
            current_section = SECTION_HEADERS[header]
            continue

        if stripped.startswith(("#", "!")):
            continue

        if not stripped.isdigit() or int(stripped) <= 0:
            logger.debug("Skipping invalid card id on line {}: {!r}", line_num, stripped)
            continue

        if current_section is not None:
            sections[current_section].append(int(stripped))

    return DeckForImage(**sections)


def _base64_to_passcodes(b64_string: str) -> list[int]:
    try:
        raw = base64.b64decode(b64_string, validate=True)
    except (binascii.Error, ValueError) as error:
        raise DeckParsingError(f"Invalid base64 in YDKe section: {error}") from error

    if len(raw) % 4:
        raise DeckParsingError("YDKe section length is not a multiple of 4 bytes")

    return np.frombuffer(raw, dtype="<u4").tolist()


def parse_ydke(url: str) -> DeckForImage:
    """Parse a ``ydke://main!extra!side!`` deck URL."""
    ydke_text = url.strip().replace('"', "")
    if not ydke_text.startswith(YDKE_PREFIX):
        raise DeckParsingError(
            'Unrecognized YDKe format. Expected "ydke://[main]![extra]![side]!"'
        )

    components = ydke_text[len(YDKE_PREFIX) :].split("!")
    if len(components) != 4:
        raise DeckParsingError(
            'Unrecognized YDKe format. Expected "ydke://[main]![extra]![side]!"'
        )

    return DeckForImage(
        maindeck=_base64_to_passcodes(components[0]),
        extradeck=_base64_to_passcodes(components[1]),
        sidedeck=_base64_to_passcodes(components[2]),
    )


def detect_format(source: str) -> DeckFormat:
    if source.strip().startswith(YDKE_PREFIX):
        return DeckFormat.YDKE
    return DeckFormat.YDK


def load_deck(source: Union[str, Path]) -> DeckForImage:
    """Load a deck from a YDKe URL, a .ydk path, or a .txt file holding a YDKe URL.

    Raises:
        DeckParsingError: If the file cannot be read or the format is unknown
    """
    if isinstance(source, str) and detect_format(source) is DeckFormat.YDKE:
        return parse_ydke(source)

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as error:
        raise DeckParsingError(f"Could not read deck file '{path}': {error}") from error

    if detect_format(text) is DeckFormat.YDKE:
        return parse_ydke(text)
    if path.suffix.lower() not in (".ydk", ".txt"):
        raise DeckParsingError(f"Unrecognized deck file type: '{path.suffix}'")

    return parse_ydk(text)
