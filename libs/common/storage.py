"""Local disk storage for uploaded images.

Uploaded files live under ``UPLOAD_DIR/<folder>/`` and are referenced in the
database by their public path ``/uploads/<folder>/<name>``, which is what the
static mount in the app serves.

Usage:
    from libs.common.storage import get_file_storage

    storage = get_file_storage()
    path = await storage.store(data, "cpr.png", folder=CONTENT_UPLOADS, prefix="content")
    await storage.release(path)
"""

import os
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol

from fastapi import UploadFile

from libs.common.config import get_settings
from libs.common.errors import InvalidInputError
from libs.common.logging import get_logger

logger = get_logger(__name__)

CONTENT_UPLOADS = "content_uploads"
MODULE_UPLOADS = "module_uploads"
PROFILE_UPLOADS = "profilePic_uploads"

PUBLIC_PREFIX = "/uploads/"


class FileReleaser(Protocol):
    async def release(self, path: Optional[str]) -> None: ...


class LocalFileStorage:
    """File-storage collaborator backed by the local filesystem."""

    def __init__(self, root: str, protected_paths: Optional[set[str]] = None):
        self.root = Path(root)
        self.protected_paths = protected_paths or set()

    def _disk_path(self, public_path: str) -> Path:
        relative = public_path
        if relative.startswith(PUBLIC_PREFIX):
            relative = relative[len(PUBLIC_PREFIX):]
        elif relative.startswith("uploads/"):
            relative = relative[len("uploads/"):]
        resolved = (self.root / relative).resolve()
        if self.root.resolve() not in resolved.parents:
            raise ValueError(f"Refusing to touch a path outside uploads: {public_path}")
        return resolved

    async def store(
        self, data: bytes, filename: str, folder: str, prefix: str = "file"
    ) -> str:
        """Write ``data`` to disk and return its public path."""
        ext = os.path.splitext(filename or "")[1].lower()
        name = f"{prefix}_{uuid.uuid4().hex}{ext}"
        directory = self.root / folder
        directory.mkdir(parents=True, exist_ok=True)
        (directory / name).write_bytes(data)
        logger.info("Stored upload %s/%s (%d bytes)", folder, name, len(data))
        return f"{PUBLIC_PREFIX}{folder}/{name}"

    async def release(self, path: Optional[str]) -> None:
        """Delete the file behind ``path``; missing files and protected paths are ignored."""
        if not path or path in self.protected_paths:
            return
        try:
            disk_path = self._disk_path(path)
        except ValueError as e:
            logger.warning(str(e))
            return
        if disk_path.exists():
            disk_path.unlink()
            logger.info("Released upload %s", path)


async def store_image_upload(
    storage: LocalFileStorage, upload: Optional[UploadFile], folder: str, prefix: str
) -> Optional[str]:
    """Store an uploaded image form field; returns ``None`` when no file was sent."""
    if upload is None or not upload.filename:
        return None
    if upload.content_type and not upload.content_type.startswith("image/"):
        raise InvalidInputError(
            "File must be an image", context={"content_type": upload.content_type}
        )
    data = await upload.read()
    return await storage.store(data, upload.filename, folder=folder, prefix=prefix)


@lru_cache
def get_file_storage() -> LocalFileStorage:
    """
    FastAPI dependency returning the process-wide storage instance.
    """
    settings = get_settings()
    return LocalFileStorage(
        settings.UPLOAD_DIR, protected_paths={settings.DEFAULT_AVATAR}
    )
