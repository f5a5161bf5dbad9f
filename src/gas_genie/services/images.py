"""Image helpers shared by upload and diagnosis flows."""

import base64
from pathlib import PurePosixPath

_EXTENSIONS_BY_MIME: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type or detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved};base64,{encoded}"


def file_extension(filename: str | None, content_type: str | None) -> str:
    """Pick a storage file extension from the filename or content type."""
    if filename:
        suffix = PurePosixPath(filename).suffix.lower().lstrip(".")
        if suffix.isalnum() and 0 < len(suffix) <= 5:
            return "jpg" if suffix == "jpeg" else suffix
    if content_type:
        return _EXTENSIONS_BY_MIME.get(content_type.split(";")[0].strip(), "jpg")
    return "jpg"
