"""Item image storage."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile

from marketplace.core.config import StorageSettings
from marketplace.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024
_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class ImageUploadError(UpstreamFailure):
    default_message = "Failed to upload image"


class ImageStore(Protocol):
    async def save(self, upload: UploadFile) -> str:
        """Persist the upload and return the public URL."""
        ...

    async def delete(self, url: str) -> None:
        ...


@dataclass(slots=True)
class LocalImageStore:
    """Writes images below ``root`` and serves them under ``url_prefix``."""

    root: Path
    url_prefix: str = "/uploads"
    max_bytes: int = 5 * 1024 * 1024
    allowed_types: frozenset[str] = field(default_factory=lambda: frozenset(_EXTENSIONS))

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "LocalImageStore":
        return cls(
            root=Path(settings.image_dir).resolve(),
            url_prefix=settings.image_url_prefix.rstrip("/"),
            max_bytes=settings.max_image_bytes,
            allowed_types=frozenset(settings.allowed_image_types),
        )

    async def save(self, upload: UploadFile) -> str:
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        if content_type not in self.allowed_types:
            await upload.close()
            raise ImageUploadError("Only image files are allowed")

        suffix = _EXTENSIONS.get(content_type) or Path(upload.filename or "").suffix.lower()
        file_name = f"{os.urandom(16).hex()}{suffix}"
        target_path = self.root / file_name

        total_size = 0
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with target_path.open("wb") as buffer:
                while True:
                    chunk = await upload.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    total_size += len(chunk)
                    if total_size > self.max_bytes:
                        break
                    buffer.write(chunk)
        except OSError as exc:
            target_path.unlink(missing_ok=True)
            logger.error("Failed to write image %s: %s", target_path, exc)
            raise ImageUploadError(detail=str(exc)) from exc
        finally:
            await upload.close()

        if total_size == 0:
            target_path.unlink(missing_ok=True)
            raise ImageUploadError("Uploaded image is empty")
        if total_size > self.max_bytes:
            target_path.unlink(missing_ok=True)
            raise ImageUploadError(f"Image exceeds the {self.max_bytes} byte limit")

        logger.info("Stored image %s (%s bytes)", file_name, total_size)
        return f"{self.url_prefix}/{file_name}"

    async def delete(self, url: str) -> None:
        path = self._path_for(url)
        if path is None:
            logger.warning("Ignoring delete of foreign image url %s", url)
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise ImageUploadError("Failed to delete image", detail=str(exc)) from exc

    def _path_for(self, url: str) -> Path | None:
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        name = os.path.basename(url[len(prefix):])
        if not name:
            return None
        return self.root / name


__all__ = ["ImageStore", "ImageUploadError", "LocalImageStore"]
