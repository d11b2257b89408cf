"""File handling for complaint attachments and profile pictures.

Uploaded files are inlined as base64 data URLs so they travel inside the
persisted records.
"""

import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from complaint_desk.config import (
    MAX_ATTACHMENT_BYTES,
    MAX_PROFILE_PICTURE_BYTES,
    PROFILE_PICTURE_JPEG_QUALITY,
    PROFILE_PICTURE_MAX_SIZE,
)
from complaint_desk.core.exceptions import ValidationError
from complaint_desk.schemas.complaint import ComplaintAttachment

logger = logging.getLogger(__name__)


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def build_attachment(
    filename: str,
    content: bytes,
    content_type: str = "application/octet-stream",
) -> ComplaintAttachment:
    """Wrap an uploaded file as a complaint attachment.

    Args:
        filename: Original file name.
        content: Raw file bytes.
        content_type: MIME type reported by the client.

    Returns:
        ComplaintAttachment with the content inlined.

    Raises:
        ValidationError: If the file exceeds the 5MB limit.
    """
    if len(content) > MAX_ATTACHMENT_BYTES:
        raise ValidationError("File is too large. Please select a file under 5MB.")
    content_type = content_type or "application/octet-stream"
    return ComplaintAttachment(
        name=filename,
        size=len(content),
        type=content_type,
        data_url=to_data_url(content, content_type),
    )


def resize_profile_picture(content: bytes, content_type: str) -> str:
    """Scale an uploaded image to fit the profile picture box.

    The aspect ratio is kept; images already inside the box are not enlarged.

    Args:
        content: Raw image bytes.
        content_type: MIME type reported by the client.

    Returns:
        JPEG data URL of the resized picture.

    Raises:
        ValidationError: If the upload is not an image, is too large or
            cannot be decoded.
    """
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Please select a valid image file (PNG, JPEG, etc.).")
    if len(content) > MAX_PROFILE_PICTURE_BYTES:
        raise ValidationError("File is too large. Please select an image under 10MB.")

    try:
        image = Image.open(io.BytesIO(content)).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Could not decode profile picture: %s", e)
        raise ValidationError("Failed to load image for resizing.") from e

    width, height = image.size
    box = PROFILE_PICTURE_MAX_SIZE
    if width > height:
        if width > box:
            height = round(height * (box / width))
            width = box
    elif height > box:
        width = round(width * (box / height))
        height = box
    image = image.resize((max(width, 1), max(height, 1)))

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=PROFILE_PICTURE_JPEG_QUALITY)
    return to_data_url(buffer.getvalue(), "image/jpeg")
