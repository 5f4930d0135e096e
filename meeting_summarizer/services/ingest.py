from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from meeting_summarizer.core.errors import InputValidationError

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_CHARS = 10
ADDITIONAL_TEXT_DIVIDER = "\n\nAdditional text:\n"
TRANSCRIPT_REQUIRED = "Transcript is required and should be at least 10 characters."


class UploadTooLarge(Exception):
    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"File too large (max {max_bytes // (1024 * 1024)}MB)")


@dataclass
class TranscriptInput:
    raw_text: str = ""
    uploaded_file_text: Optional[str] = None

    def resolve(self) -> str:
        """
        Uploaded file text comes first; pasted text is appended after a labeled
        divider. Either one alone is used as-is.
        """
        raw = self.raw_text or ""
        if self.uploaded_file_text is None:
            return raw
        if raw:
            return self.uploaded_file_text + ADDITIONAL_TEXT_DIVIDER + raw
        return self.uploaded_file_text


def ingest(*, text: Optional[str], file_text: Optional[str]) -> str:
    """
    Returns the combined transcript, or raises InputValidationError when it is
    shorter than MIN_TRANSCRIPT_CHARS after trimming.
    """
    transcript = TranscriptInput(raw_text=text or "", uploaded_file_text=file_text).resolve()
    if len(transcript.strip()) < MIN_TRANSCRIPT_CHARS:
        raise InputValidationError(TRANSCRIPT_REQUIRED)
    return transcript


def is_text_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    name = (filename or "").lower()
    ctype = (content_type or "").lower()
    return ctype.startswith("text/plain") or name.endswith(".txt")


async def read_upload_text(file: UploadFile, max_bytes: int) -> str:
    """
    Reads the upload as UTF-8 and releases its spooled temp file afterwards.
    A failed release is logged and never raised.
    """
    try:
        data = await file.read()
    finally:
        try:
            await file.close()
        except Exception as e:
            logger.warning(f"upload_cleanup_failed filename={file.filename!r}: {type(e).__name__}: {e}")

    if len(data) > max_bytes:
        raise UploadTooLarge(max_bytes)
    return data.decode("utf-8", errors="replace")
