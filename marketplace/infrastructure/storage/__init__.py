"""File storage backends."""

from .images import ImageStore, ImageUploadError, LocalImageStore

__all__ = ["ImageStore", "ImageUploadError", "LocalImageStore"]
