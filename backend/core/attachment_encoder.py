# backend/core/attachment_encoder.py

import base64
import logging
from typing import Protocol, Optional

from models.session_models import Attachment

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/heic",
    "application/pdf",
)

UNSUPPORTED_MESSAGE = "Only images (PNG, JPEG, WEBP, HEIC) and PDFs are supported."


class UnsupportedAttachmentError(Exception):
    """Raised for files outside the allow-list. The message is safe to show."""

    def __init__(self, filename: str, mime_type: Optional[str]):
        self.filename = filename
        self.mime_type = mime_type
        super().__init__(f"{filename}: {UNSUPPORTED_MESSAGE}")


class UploadedFile(Protocol):
    """The subset of fastapi.UploadFile the encoder relies on."""
    filename: Optional[str]
    content_type: Optional[str]

    async def read(self) -> bytes: ...


def is_allowed(mime_type: Optional[str]) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def encode_attachment(filename: str, mime_type: Optional[str], data: bytes) -> Attachment:
    """Base64-encodes a file. Images also get a data URI preview."""
    if not is_allowed(mime_type):
        raise UnsupportedAttachmentError(filename, mime_type)

    payload = base64.b64encode(data).decode("ascii")
    preview = f"data:{mime_type};base64,{payload}" if mime_type.startswith("image/") else ""
    return Attachment(filename=filename, mime_type=mime_type, preview=preview, payload=payload)


async def read_attachment(upload: UploadedFile) -> Attachment:
    # Reject before reading so a large unsupported file costs nothing
    filename = upload.filename or "attachment"
    if not is_allowed(upload.content_type):
        raise UnsupportedAttachmentError(filename, upload.content_type)

    data = await upload.read()
    logger.info(f"Encoded attachment {filename} ({upload.content_type}, {len(data)} bytes)")
    return encode_attachment(filename, upload.content_type, data)
