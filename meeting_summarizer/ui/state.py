from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from meeting_summarizer.services.email_dispatch import DEFAULT_SUBJECT
from meeting_summarizer.services.ingest import is_text_upload
from meeting_summarizer.services.summarizer import DEFAULT_INSTRUCTION

INVALID_FILE = "Please select a valid .txt file"
MISSING_INPUT = "Please upload a file or enter transcript text"
SUMMARY_OK = "Summary generated successfully!"
MISSING_EMAIL_INPUT = "Please ensure you have a summary and at least one recipient"
EMAIL_OK = "Email sent successfully!"


@dataclass(frozen=True)
class FormState:
    """Everything the page shows. Each user action maps to one reducer below."""

    file_name: str = ""
    transcript: str = ""
    prompt: str = DEFAULT_INSTRUCTION
    summary: str = ""
    editable_summary: str = ""
    recipients: str = ""
    subject: str = DEFAULT_SUBJECT
    message: str = ""
    is_loading: bool = False
    is_email_sending: bool = False

    @property
    def message_kind(self) -> str:
        return "error" if "Error" in self.message else "success"


def select_file(state: FormState, filename: Optional[str], content_type: Optional[str]) -> FormState:
    if filename and is_text_upload(filename, content_type):
        return replace(state, file_name=filename)
    return replace(state, file_name="", message=INVALID_FILE)


def start_summary(state: FormState) -> FormState:
    if not state.file_name and not state.transcript.strip():
        return replace(state, message=MISSING_INPUT)
    return replace(state, is_loading=True, message="")


def summary_succeeded(state: FormState, summary: str) -> FormState:
    return replace(
        state,
        summary=summary,
        editable_summary=summary,
        message=SUMMARY_OK,
        is_loading=False,
    )


def summary_failed(state: FormState, error: str) -> FormState:
    return replace(state, message=f"Error: {error}", is_loading=False)


def edit_summary(state: FormState, text: str) -> FormState:
    return replace(state, editable_summary=text)


def start_email(state: FormState) -> FormState:
    if not state.editable_summary.strip() or not state.recipients.strip():
        return replace(state, message=MISSING_EMAIL_INPUT)
    return replace(state, is_email_sending=True, message="")


def email_succeeded(state: FormState) -> FormState:
    return replace(state, message=EMAIL_OK, recipients="", is_email_sending=False)


def email_failed(state: FormState, error: str) -> FormState:
    return replace(state, message=f"Error sending email: {error}", is_email_sending=False)


def clear_all(state: FormState | None = None) -> FormState:
    return FormState()
