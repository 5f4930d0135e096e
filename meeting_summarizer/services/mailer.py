from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import List, Optional, Protocol

from meeting_summarizer.core.config import FROM_EMAIL, SMTP_HOST, SMTP_PASS, SMTP_PORT, SMTP_USER
from meeting_summarizer.core.errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class OutgoingEmail:
    recipients: List[str]
    subject: str
    plain_text: str
    html: str


class Mailer(Protocol):
    def send_mail(self, message: OutgoingEmail) -> str: ...


def build_mime_message(message: OutgoingEmail, sender: Optional[str]) -> EmailMessage:
    """
    multipart/alternative with the plain text first and the HTML rendering last,
    so clients that can show HTML prefer it.
    """
    mime = EmailMessage()
    if sender:
        mime["From"] = sender
    mime["To"] = ", ".join(message.recipients)
    mime["Subject"] = message.subject

    domain = sender.rsplit("@", 1)[-1] if sender and "@" in sender else None
    mime["Message-ID"] = make_msgid(domain=domain)

    mime.set_content(message.plain_text)
    mime.add_alternative(message.html, subtype="html")
    return mime


class SmtpMailer:
    def __init__(
        self,
        host: Optional[str] = SMTP_HOST,
        port: int = SMTP_PORT,
        user: Optional[str] = SMTP_USER,
        password: Optional[str] = SMTP_PASS,
        sender: Optional[str] = FROM_EMAIL,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender

    def send_mail(self, message: OutgoingEmail) -> str:
        if not self.host:
            raise RuntimeError("SMTP_HOST is not set")

        mime = build_mime_message(message, self.sender)
        try:
            with smtplib.SMTP(self.host, self.port) as smtp:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                if self.user:
                    smtp.login(self.user, self.password or "")
                smtp.send_message(mime, from_addr=self.sender, to_addrs=message.recipients)
        except (smtplib.SMTPException, OSError) as e:
            raise UpstreamError(f"smtp send failed: {type(e).__name__}: {e}") from e

        logger.info(f"smtp_sent host={self.host} recipients={len(message.recipients)} message_id={mime['Message-ID']}")
        return mime["Message-ID"]
