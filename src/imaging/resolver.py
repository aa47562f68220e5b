"""Card art resolution with tiered fallbacks.

Resolution order for one card id:

1. Memory  - raw bytes already loaded by this resolver
2. Local   - ``{card_image_dir}/{card_id}.jpg`` on a mounted volume
3. Remote  - ``{remote_base_url}/{card_id}.jpg``
4. Placeholder - the card-back image, or a flat grey tile if even that fails

Local and remote hits are stored in the memory tier, so each card is read
from disk or the network at most once per resolver. The memory tier is never
evicted automatically; call :meth:`CardImageResolver.clear`.

Memory inserts are not locked. Two threads missing on the same id may both
fetch it and the second write wins; the bytes are identical either way.
"""

import io
import threading
from collections import Counter
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from config.settings import DeckImageSettings, settings as default_settings
from core.logging import get_logger
from errors import AssetError, DeckImageError
from net.network import RetryConfig, fetch_bytes

logger = get_logger(__name__)

# Solid tile used when art cannot be decoded or resized
FALLBACK_COLOR = (50, 50, 50, 255)

Fetcher = Callable[[str], bytes]

TIERS = ("memory", "local", "remote", "placeholder")


def solid_tile(width: int, height: int, color=FALLBACK_COLOR) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def resize_fill(data: bytes, width: int, height: int) -> Image.Image:
    """Decode ``data`` and stretch it to exactly ``width`` x ``height``.

    Raises:
        AssetError: If the bytes are empty or cannot be decoded
    """
    if not data:
        raise AssetError("Cannot resize an empty image buffer")
    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            return source.convert("RGBA").resize(
                (width, height), Image.Resampling.LANCZOS
            )
    except (OSError, ValueError, Image.DecompressionBombError) as error:
        raise AssetError(f"Could not decode card art: {error}") from error


class CardImageResolver:
    """Resolves card ids to tiles of an exact size.

    Args:
        config: Settings providing the art sources and HTTP behaviour
        fetch: Callable returning the body of a URL or raising; defaults to
            :func:`net.network.fetch_bytes` with the configured retry policy
    """

    def __init__(
        self,
        config: Optional[DeckImageSettings] = None,
        fetch: Optional[Fetcher] = None,
    ):
        self.config = config or default_settings
        self.local_dir = Path(self.config.card_image_dir)
        self._fetch = fetch if fetch is not None else self._default_fetch
        self._retry = RetryConfig(
            max_retries=self.config.http_max_retries,
            timeout=self.config.http_timeout,
        )
        self._memory: dict[int, bytes] = {}
        self._placeholder: Optional[bytes] = None
        self._hits: Counter = Counter()
        self._stats_lock = threading.Lock()

    def _default_fetch(self, url: str) -> bytes:
        return fetch_bytes(url, config=self._retry, user_agent=self.config.user_agent)

    def _record(self, tier: str) -> None:
        with self._stats_lock:
            self._hits[tier] += 1

    def local_path(self, card_id: int) -> Path:
        return self.local_dir / f"{card_id}.jpg"

    def remote_url(self, card_id: int) -> str:
        return f"{self.config.remote_base_url}/{card_id}.jpg"

    def resolve(self, card_id: int, width: int, height: int) -> Image.Image:
        """Return an RGBA tile of exactly ``width`` x ``height`` for ``card_id``.

        Never raises; the worst case is a flat grey tile.
        """
        data = self._load(card_id)
        if data is None:
            return self._placeholder_tile(card_id, width, height)

        try:
            return resize_fill(data, width, height)
        except AssetError as error:
            logger.warning("Card {} art unusable, using solid tile: {}", card_id, error)
            return solid_tile(width, height)

    def _load(self, card_id: int) -> Optional[bytes]:
        """Raw bytes for a card from the first tier that has them."""
        data = self._memory.get(card_id)
        if data is not None:
            self._record("memory")
            return data

        data = self._read_local(card_id)
        if data is not None:
            self._memory[card_id] = data
            self._record("local")
            return data

        data = self._download(card_id)
        if data is not None:
            self._memory[card_id] = data
            self._record("remote")
            if self.config.cache_downloads:
                self._write_local(card_id, data)
            return data

        return None

    def _read_local(self, card_id: int) -> Optional[bytes]:
        path = self.local_path(card_id)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Card {} not in local store", card_id)
            return None
        except OSError as error:
            logger.warning("Could not read {}: {}", path, error)
            return None
        return data or None

    def _download(self, card_id: int) -> Optional[bytes]:
        url = self.remote_url(card_id)
        try:
            data = self._fetch(url)
        except (DeckImageError, OSError) as error:
            logger.debug("Card {} not available remotely: {}", card_id, error)
            return None
        return data or None

    def _write_local(self, card_id: int, data: bytes) -> None:
        """Store downloaded art in the local store (temp file + rename)."""
        destination = self.local_path(card_id)
        tmp_path = destination.with_suffix(destination.suffix + ".part")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            tmp_path.replace(destination)
        except OSError as error:
            logger.warning("Could not cache card {} locally: {}", card_id, error)
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

    def _placeholder_tile(self, card_id: int, width: int, height: int) -> Image.Image:
        logger.warning("Card {} unresolved in every tier, using placeholder", card_id)
        self._record("placeholder")

        if self._placeholder is None:
            try:
                self._placeholder = self._fetch(self.config.placeholder_url) or None
            except (DeckImageError, OSError) as error:
                logger.warning("Placeholder image unavailable: {}", error)

        if self._placeholder is not None:
            try:
                return resize_fill(self._placeholder, width, height)
            except AssetError as error:
                logger.warning("Placeholder image unusable: {}", error)
        return solid_tile(width, height)

    def clear(self) -> None:
        """Drop every cached card and reset the statistics."""
        self._memory.clear()
        self._placeholder = None
        with self._stats_lock:
            self._hits.clear()

    def __contains__(self, card_id: int) -> bool:
        return card_id in self._memory

    def __len__(self) -> int:
        return len(self._memory)

    def stats(self) -> dict:
        """Cache statistics: memory size and hits per tier."""
        with self._stats_lock:
            hits = {tier: self._hits[tier] for tier in TIERS}
        return {
            "memory_size": len(self._memory),
            "local_dir": str(self.local_dir),
            "hits": hits,
        }
