from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from meeting_summarizer.core.errors import InputValidationError
from meeting_summarizer.core.templates import templates
from meeting_summarizer.services.mailer import Mailer, OutgoingEmail
from meeting_summarizer.services.markdown import render_email_markdown

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Meeting Summary"
FOOTER_TEXT = "This summary was generated by AI Meeting Notes Summarizer"

FIELDS_REQUIRED = 'Fields "to" and "body" are required.'
NO_RECIPIENTS = "No valid recipients provided."


@dataclass
class RenderedEmail:
    plain_text: str
    html: str


def normalize_recipients(to: Union[str, Sequence[str], None]) -> List[str]:
    """
    "a@x.com, ,b@x.com" -> ["a@x.com", "b@x.com"]. Order is kept, duplicates are not removed.
    """
    if to is None:
        return []
    pieces = to.split(",") if isinstance(to, str) else list(to)
    return [p.strip() for p in pieces if p and p.strip()]


def resolve_subject(subject: Optional[str]) -> str:
    if subject and subject.strip():
        return subject
    return DEFAULT_SUBJECT


def build_email_html(body: str, subject: str) -> str:
    return templates.get_template("email.html").render(
        subject=subject,
        content=render_email_markdown(body),
        footer=FOOTER_TEXT,
    )


def render_email(body: str, subject: str) -> RenderedEmail:
    return RenderedEmail(plain_text=body, html=build_email_html(body, subject))


def compose_email(
    to: Union[str, Sequence[str], None],
    subject: Optional[str],
    body: Optional[str],
) -> OutgoingEmail:
    """
    Validates and normalizes the request, then renders both bodies.
    Raises InputValidationError with a caller-facing message.
    """
    # An empty list is present-but-empty and falls through to NO_RECIPIENTS.
    if to is None or to == "" or not body:
        raise InputValidationError(FIELDS_REQUIRED)

    recipients = normalize_recipients(to)
    if not recipients:
        raise InputValidationError(NO_RECIPIENTS)

    email_subject = resolve_subject(subject)
    rendered = render_email(body, email_subject)
    return OutgoingEmail(
        recipients=recipients,
        subject=email_subject,
        plain_text=rendered.plain_text,
        html=rendered.html,
    )


def dispatch_email(message: OutgoingEmail, mailer: Mailer, request_id: str) -> str:
    logger.info(f"[{request_id}] sending_email recipients={len(message.recipients)} subject={message.subject!r}")
    message_id = mailer.send_mail(message)
    logger.info(f"[{request_id}] email_sent message_id={message_id}")
    return message_id
