"""
File Upload Utility - validate uploaded resumes and images.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)
- Images (.jpg/.jpeg, .png)

Max file size: settings.max_upload_mb (10MB by default)
"""

from fastapi import UploadFile

from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import PayloadTooLarge, ValidationFailed

ALLOWED_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
}

IMAGE_CONTENT_TYPES = {"image/jpeg", "image/png"}


async def read_upload(file: UploadFile, allowed_types: set = None) -> bytes:
    """
    Read and validate an uploaded file.

    Raises:
        ValidationFailed (400) for a missing file or a disallowed type
        PayloadTooLarge (413) when over the size limit
    """
    if file is None or not file.filename:
        raise ValidationFailed("No file uploaded")

    allowed = allowed_types or ALLOWED_CONTENT_TYPES
    if file.content_type not in allowed:
        raise ValidationFailed("Only PDF, Word documents, and images are allowed")

    max_mb = get_settings().max_upload_mb
    max_bytes = max_mb * 1024 * 1024
    # Read at most one byte past the limit
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise PayloadTooLarge(f"File too large. Maximum size: {max_mb}MB")
    if not content:
        raise ValidationFailed("Uploaded file is empty")

    return content


def folder_for_content_type(content_type: str) -> str:
    """Pick the storage folder for a generic upload."""
    if content_type.startswith("image/"):
        return "campus_images"
    if "document" in content_type or "pdf" in content_type or "msword" in content_type:
        return "campus_documents"
    return "campus_uploads"


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "supported_formats": sorted(ALLOWED_CONTENT_TYPES),
        "max_size_mb": get_settings().max_upload_mb,
    }
