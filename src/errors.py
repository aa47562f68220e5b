"""Exception hierarchy for deck image generation.

Only persistence and input parsing raise to the caller. Tile resolution and
per-tile compositing failures are logged and absorbed where they happen.
"""


class DeckImageError(Exception):
    """Base exception for all deck image errors.

    All custom exceptions inherit from this base class for easy catching.
    """

    pass


class NetworkError(DeckImageError):
    """Network-related errors (card art downloads, timeouts)."""

    pass


class AssetError(DeckImageError):
    """Card art that could not be decoded or resized."""

    pass


class StorageError(DeckImageError):
    """Writing or removing a generated image failed (disk full, permissions)."""

    pass


class ConfigurationError(DeckImageError):
    """Configuration errors (invalid geometry, missing directories)."""

    pass


class ValidationError(DeckImageError):
    """Validation errors (invalid input, malformed data)."""

    pass


class DeckParsingError(ValidationError):
    """Deck file parsing errors (unreadable file, unknown format)."""

    pass
