import asyncio
import base64

import pytest

from conftest import FakeUpload
from core.attachment_encoder import UnsupportedAttachmentError, encode_attachment, read_attachment


def test_image_gets_data_uri_preview():
    att = encode_attachment("logo.png", "image/png", b"pngbytes")
    payload = base64.b64encode(b"pngbytes").decode("ascii")
    assert att.payload == payload
    assert att.mime_type == "image/png"
    assert att.preview == f"data:image/png;base64,{payload}"


def test_pdf_has_empty_preview():
    att = encode_attachment("brief.pdf", "application/pdf", b"%PDF-1.7")
    assert att.preview == ""
    assert base64.b64decode(att.payload) == b"%PDF-1.7"


@pytest.mark.parametrize("mime_type", ["text/plain", "image/gif", None])
def test_disallowed_types_are_rejected(mime_type):
    with pytest.raises(UnsupportedAttachmentError):
        encode_attachment("notes", mime_type, b"data")


def test_read_attachment_rejects_without_reading():
    upload = FakeUpload("notes.txt", "text/plain", b"hello")
    with pytest.raises(UnsupportedAttachmentError) as exc:
        asyncio.run(read_attachment(upload))
    assert upload.read_count == 0
    assert "notes.txt" in str(exc.value)


def test_read_attachment_encodes_upload():
    upload = FakeUpload("photo.webp", "image/webp", b"webp")
    att = asyncio.run(read_attachment(upload))
    assert att.filename == "photo.webp"
    assert att.preview.startswith("data:image/webp;base64,")
