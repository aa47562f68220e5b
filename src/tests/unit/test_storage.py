"""Unit tests for storage/images.py"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from errors import StorageError
from storage.images import ImageKind, ImageStore


@pytest.fixture
def store(tmp_path):
    return ImageStore(tmp_path / "public")


class TestPaths:
    """Deterministic path and URL derivation."""

    def test_deck_path(self, store, tmp_path):
        assert store.path_for(ImageKind.DECK, 42) == tmp_path / "public" / "deck-images" / "42.png"

    def test_banlist_path(self, store, tmp_path):
        assert (
            store.path_for(ImageKind.BANLIST, 3)
            == tmp_path / "public" / "banlist-images" / "3.png"
        )

    def test_public_url(self):
        assert ImageStore.public_url(ImageKind.DECK, 42) == "/deck-images/42.png"
        assert ImageStore.public_url(ImageKind.BANLIST, 3) == "/banlist-images/3.png"

    def test_kind_accepts_directory_name(self, store):
        assert store.path_for("deck-images", 1) == store.path_for(ImageKind.DECK, 1)


class TestLifecycle:
    """save / exists / delete."""

    def test_save_exists_delete(self, store):
        path = store.save(ImageKind.DECK, 42, b"png-bytes")

        assert path.read_bytes() == b"png-bytes"
        assert store.exists(ImageKind.DECK, 42)

        store.delete(ImageKind.DECK, 42)
        assert not store.exists(ImageKind.DECK, 42)

        # deleting again is a no-op
        store.delete(ImageKind.DECK, 42)

    def test_save_overwrites(self, store):
        store.save(ImageKind.BANLIST, 1, b"first")
        path = store.save(ImageKind.BANLIST, 1, b"second")

        assert path.read_bytes() == b"second"
        assert list(path.parent.iterdir()) == [path]

    def test_kinds_do_not_collide(self, store):
        store.save(ImageKind.DECK, 1, b"deck")

        assert not store.exists(ImageKind.BANLIST, 1)

    def test_save_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        store = ImageStore(blocker)

        with pytest.raises(StorageError) as excinfo:
            store.save(ImageKind.DECK, 1, b"data")

        assert isinstance(excinfo.value.__cause__, OSError)
