"""Deck Image Service

Entry points used by the surrounding application: render and store a deck or
banlist image, check whether one exists, remove it, and re-render every deck
of a session after its banlist changes.

Every function takes optional ``generator`` and ``store`` arguments. When
omitted, a process-wide generator (and with it one shared card art cache) and
a store rooted at ``settings.public_root`` are used.
"""

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from core.logging import get_logger
from deck.models import BanlistForImage, DeckForImage
from imaging.compositor import DeckImageGenerator
from storage.images import ImageKind, ImageStore

logger = get_logger(__name__)

_default_generator: Optional[DeckImageGenerator] = None
_generator_lock = threading.Lock()


def get_generator() -> DeckImageGenerator:
    """Shared generator, created on first use."""
    global _default_generator
    with _generator_lock:
        if _default_generator is None:
            _default_generator = DeckImageGenerator()
        return _default_generator


def reset_generator() -> None:
    """Drop the shared generator and its card art cache."""
    global _default_generator
    with _generator_lock:
        _default_generator = None


def _store(store: Optional[ImageStore]) -> ImageStore:
    return store if store is not None else ImageStore()


def public_url(kind: ImageKind, key: int) -> str:
    """Web path of a stored image, e.g. ``/deck-images/42.png``."""
    return ImageStore.public_url(kind, key)


def save_deck_image(
    decklist_id: int,
    deck: DeckForImage,
    banlist: Optional[BanlistForImage] = None,
    *,
    generator: Optional[DeckImageGenerator] = None,
    store: Optional[ImageStore] = None,
) -> Path:
    """Render a deck and store it under its decklist id.

    Raises:
        StorageError: If the image cannot be written
    """
    generator = generator if generator is not None else get_generator()
    data = generator.render_deck(deck, banlist)
    return _store(store).save(ImageKind.DECK, decklist_id, data)


def save_banlist_image(
    banlist: BanlistForImage,
    session_number: int,
    previous: Optional[BanlistForImage] = None,
    *,
    generator: Optional[DeckImageGenerator] = None,
    store: Optional[ImageStore] = None,
) -> Path:
    """Render a session's banlist and store it under the session number.

    ``previous`` is the banlist of the preceding session; cards that moved
    into a category since then are tagged NEW.
    """
    generator = generator if generator is not None else get_generator()
    data = generator.render_banlist(banlist, session_number, previous)
    return _store(store).save(ImageKind.BANLIST, session_number, data)


def deck_image_exists(decklist_id: int, *, store: Optional[ImageStore] = None) -> bool:
    return _store(store).exists(ImageKind.DECK, decklist_id)


def delete_deck_image(decklist_id: int, *, store: Optional[ImageStore] = None) -> None:
    _store(store).delete(ImageKind.DECK, decklist_id)


def banlist_image_exists(
    session_number: int, *, store: Optional[ImageStore] = None
) -> bool:
    return _store(store).exists(ImageKind.BANLIST, session_number)


def delete_banlist_image(
    session_number: int, *, store: Optional[ImageStore] = None
) -> None:
    _store(store).delete(ImageKind.BANLIST, session_number)


@dataclass
class RegenerationSummary:
    """Summary of re-rendering a batch of deck images."""

    total_requested: int
    succeeded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    total_duration: float = 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_requested == 0:
            return 0.0
        return (len(self.succeeded) / self.total_requested) * 100


def regenerate_deck_images(
    decklists: Mapping[int, DeckForImage],
    banlist: Optional[BanlistForImage] = None,
    *,
    generator: Optional[DeckImageGenerator] = None,
    store: Optional[ImageStore] = None,
) -> RegenerationSummary:
    """Re-render every deck of a session, one after another.

    A deck that fails is logged and recorded in the summary; the remaining
    decks are still processed.
    """
    generator = generator if generator is not None else get_generator()
    store = _store(store)
    summary = RegenerationSummary(total_requested=len(decklists))
    logger.info("Regenerating {} deck images", len(decklists))

    start_time = time.time()
    for decklist_id, deck in decklists.items():
        try:
            save_deck_image(
                decklist_id, deck, banlist, generator=generator, store=store
            )
        except Exception as e:
            logger.error("✗ Failed to regenerate deck image {}: {}", decklist_id, e)
            summary.failed.append(decklist_id)
        else:
            summary.succeeded.append(decklist_id)

    summary.total_duration = time.time() - start_time
    logger.info(
        "Regeneration complete: {}/{} successful ({:.1f}%) in {:.1f}s",
        len(summary.succeeded),
        summary.total_requested,
        summary.success_rate,
        summary.total_duration,
    )
    return summary
