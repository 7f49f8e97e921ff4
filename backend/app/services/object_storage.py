"""Store exported artifacts and hand back a public link to them."""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from backend.app.core.errors import UploadFailure
from backend.app.core.logging import get_logger
from backend.app.core.time import epoch_millis

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^A-Za-z0-9._\-]")


class ObjectStorage(Protocol):
    def upload(self, data: bytes, content_type: str, filename: str) -> str:
        ...


def unique_filename(base_name: str, now: datetime, extension: str = "pdf") -> str:
    """``Invoice 12`` at some instant -> ``Invoice-12-<epoch millis>.pdf``."""
    stem = _UNSAFE.sub("", _WHITESPACE.sub("-", base_name.strip()))
    return f"{stem}-{epoch_millis(now)}.{extension}"


class LocalObjectStorage:
    """Writes files under a directory that is served at ``public_base_url``.

    Uploading the same filename twice overwrites the earlier file.
    """

    def __init__(self, directory: str | Path, public_base_url: str):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def upload(self, data: bytes, content_type: str, filename: str) -> str:
        if not data:
            raise UploadFailure("Refusing to upload an empty file", {"filename": filename})
        name = Path(filename).name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / name).write_bytes(data)
        except OSError as exc:
            logger.error("Upload of %s failed: %s", name, exc)
            raise UploadFailure("Could not store the file", {"filename": name, "error": str(exc)}) from exc
        logger.info("Stored %s (%s, %s bytes)", name, content_type, len(data))
        return f"{self.public_base_url}/{name}"

    def local_path(self, url: str) -> Optional[Path]:
        """Map a URL this storage handed out back to the stored file."""
        prefix = f"{self.public_base_url}/"
        if not url.startswith(prefix):
            return None
        path = self.directory / Path(url[len(prefix):]).name
        return path if path.is_file() else None


def get_object_storage(settings) -> LocalObjectStorage:
    return LocalObjectStorage(settings.storage_dir, settings.storage_public_base_url)


def get_asset_storage(settings) -> LocalObjectStorage:
    return LocalObjectStorage(settings.logo_storage_dir, settings.logo_public_base_url)
