"""Test doubles shared across the image pipeline tests."""

import io

from PIL import Image

from errors import NetworkError


def make_jpeg(color=(200, 30, 30), size=(40, 58)) -> bytes:
    """Small solid-color JPEG, standing in for downloaded card art."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


class FakeFetch:
    """Stand-in for the HTTP layer: serves canned bodies and records every URL.

    Unknown URLs raise NetworkError, like a 404 does in production.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        if url not in self.responses:
            raise NetworkError(f"HTTP 404 from {url}")
        return self.responses[url]

    def count(self, url: str) -> int:
        return self.calls.count(url)


class SolidResolver:
    """Resolver that paints every tile one flat color, optionally failing some ids."""

    def __init__(self, color=(0, 0, 255, 255), fail_ids=()):
        self.color = color
        self.fail_ids = set(fail_ids)
        self.requested = []

    def resolve(self, card_id, width, height):
        self.requested.append(card_id)
        if card_id in self.fail_ids:
            raise RuntimeError(f"card {card_id} exploded")
        return Image.new("RGBA", (width, height), self.color)
