import asyncio
import io

import pytest
from starlette.datastructures import UploadFile

from meeting_summarizer.core.errors import InputValidationError
from meeting_summarizer.services.ingest import (
    TRANSCRIPT_REQUIRED,
    TranscriptInput,
    UploadTooLarge,
    ingest,
    is_text_upload,
    read_upload_text,
)


def test_file_text_comes_first_then_divider_then_pasted_text():
    out = ingest(text="pasted notes", file_text="file content here")
    assert out == "file content here\n\nAdditional text:\npasted notes"


def test_pasted_text_alone_is_kept_untrimmed():
    assert ingest(text="  Alice: ship it on Friday  ", file_text=None) == "  Alice: ship it on Friday  "


def test_file_text_alone():
    assert TranscriptInput(uploaded_file_text="Bob: budget approved").resolve() == "Bob: budget approved"


@pytest.mark.parametrize("text", [None, "", "short", "   tiny    "])
def test_transcript_under_ten_chars_is_rejected(text):
    with pytest.raises(InputValidationError) as exc:
        ingest(text=text, file_text=None)
    assert str(exc.value) == TRANSCRIPT_REQUIRED


def test_short_file_and_text_pass_once_combined():
    assert ingest(text="b", file_text="a")  # divider label pushes it over the minimum


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("notes.txt", "text/plain", True),
        ("NOTES.TXT", None, True),
        ("notes", "text/plain; charset=utf-8", True),
        ("notes.pdf", "application/pdf", False),
        ("image.png", "image/png", False),
    ],
)
def test_is_text_upload(filename, content_type, expected):
    assert is_text_upload(filename, content_type) is expected


def test_read_upload_text_decodes_utf8():
    upload = UploadFile(file=io.BytesIO("Zoë: agenda\n".encode("utf-8")), filename="notes.txt")
    assert asyncio.run(read_upload_text(upload, max_bytes=1024)) == "Zoë: agenda\n"


def test_read_upload_text_replaces_invalid_bytes():
    upload = UploadFile(file=io.BytesIO(b"ok \xff done"), filename="notes.txt")
    assert asyncio.run(read_upload_text(upload, max_bytes=1024)) == "ok \ufffd done"


def test_read_upload_text_enforces_size_limit():
    upload = UploadFile(file=io.BytesIO(b"x" * 20), filename="notes.txt")
    with pytest.raises(UploadTooLarge):
        asyncio.run(read_upload_text(upload, max_bytes=10))


def test_read_upload_text_ignores_cleanup_failure():
    class StuckUpload(UploadFile):
        async def close(self):
            raise OSError("temp file busy")

    upload = StuckUpload(file=io.BytesIO(b"meeting transcript"), filename="notes.txt")
    assert asyncio.run(read_upload_text(upload, max_bytes=1024)) == "meeting transcript"
