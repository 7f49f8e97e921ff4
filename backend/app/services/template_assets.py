"""Checks and stores the logo images shown in invoice headers."""

import io
import uuid
from datetime import datetime

from PIL import Image, UnidentifiedImageError

from backend.app.core.errors import InvalidUpload
from backend.app.core.logging import get_logger
from backend.app.core.time import epoch_millis
from backend.app.services.object_storage import ObjectStorage

logger = get_logger(__name__)

MAX_LOGO_BYTES = 5 * 1024 * 1024


def logo_filename(upload_name: str | None, now: datetime) -> str:
    extension = "png"
    if upload_name and "." in upload_name:
        suffix = upload_name.rsplit(".", 1)[1].lower()
        if suffix.isalnum():
            extension = suffix
    return f"logo-{epoch_millis(now)}-{uuid.uuid4().hex[:12]}.{extension}"


def upload_logo(
    storage: ObjectStorage, data: bytes, content_type: str | None, upload_name: str | None, now: datetime
) -> str:
    """Validate an uploaded logo and return its public URL."""
    if not content_type or not content_type.startswith("image/"):
        raise InvalidUpload("Please upload an image file", {"content_type": content_type})
    if not data:
        raise InvalidUpload("The uploaded file is empty")
    if len(data) > MAX_LOGO_BYTES:
        raise InvalidUpload("File size must be less than 5MB", {"size": len(data), "limit": MAX_LOGO_BYTES})
    try:
        Image.open(io.BytesIO(data)).verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InvalidUpload("The uploaded file is not a readable image", {"content_type": content_type}) from exc

    filename = logo_filename(upload_name, now)
    url = storage.upload(data, content_type, filename)
    logger.info("Stored logo %s (%s bytes)", filename, len(data))
    return url
