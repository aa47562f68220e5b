"""Filesystem storage for generated deck and banlist images.

Paths are a pure function of (kind, key):

    {public_root}/deck-images/{decklist_id}.png
    {public_root}/banlist-images/{session_number}.png

Saving the same key again overwrites the previous image. Writes go to a
``.part`` file first and are renamed into place, so readers never see a
half-written PNG.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from config.settings import settings as default_settings
from core.logging import get_logger
from errors import StorageError

logger = get_logger(__name__)

IMAGE_SUFFIX = ".png"


class ImageKind(str, Enum):
    """Image families, valued by their directory under the public root."""

    DECK = "deck-images"
    BANLIST = "banlist-images"


class ImageStore:
    """Saves, checks and removes generated images.

    Args:
        public_root: Web root directory (defaults to ``settings.public_root``)
    """

    def __init__(self, public_root: Optional[Union[str, Path]] = None):
        self.public_root = Path(public_root or default_settings.public_root)

    def path_for(self, kind: ImageKind, key: int) -> Path:
        return self.public_root / ImageKind(kind).value / f"{key}{IMAGE_SUFFIX}"

    @staticmethod
    def public_url(kind: ImageKind, key: int) -> str:
        """URL path under which the web server exposes an image."""
        return f"/{ImageKind(kind).value}/{key}{IMAGE_SUFFIX}"

    def save(self, kind: ImageKind, key: int, data: bytes) -> Path:
        """Write an image, replacing any previous one for the same key.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        kind = ImageKind(kind)
        destination = self.path_for(kind, key)
        tmp_path = destination.with_suffix(destination.suffix + ".part")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            tmp_path.replace(destination)
        except OSError as e:
            logger.error("Failed to save {} image {}: {}", kind.value, key, e)
            raise StorageError(f"Could not write {destination}: {e}") from e
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

        logger.info("Saved {} ({} bytes)", destination, len(data))
        return destination

    def exists(self, kind: ImageKind, key: int) -> bool:
        return self.path_for(kind, key).is_file()

    def delete(self, kind: ImageKind, key: int) -> None:
        """Remove an image. Removing one that does not exist is a no-op.

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        path = self.path_for(kind, key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to delete {}: {}", path, e)
            raise StorageError(f"Could not delete {path}: {e}") from e
        logger.debug("Deleted {}", path)
