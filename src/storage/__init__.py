"""Persistence of generated images under the public web root."""

from storage.images import ImageKind, ImageStore

__all__ = ["ImageKind", "ImageStore"]
