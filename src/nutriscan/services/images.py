"""Image payload helpers shared by the API and vision providers."""

import base64
import binascii

from nutriscan.domain.errors import InvalidImageError


def decode_data_url(data_url: str | None) -> bytes:
    """Decode a base64 data URI (or bare base64 string) into image bytes."""
    if not data_url or not data_url.strip():
        raise InvalidImageError("No image data provided")
    payload = data_url.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        if ";base64" not in header:
            raise InvalidImageError("Image data URI must be base64 encoded")
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("Image data is not valid base64") from exc
    if not image_bytes:
        raise InvalidImageError("No image data provided")
    return image_bytes


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
