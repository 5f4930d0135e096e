from fastapi import Form

from meeting_summarizer.services.email_dispatch import DEFAULT_SUBJECT
from meeting_summarizer.services.llm_client import ChatCompletionGenerator, TextGenerator
from meeting_summarizer.services.mailer import Mailer, SmtpMailer
from meeting_summarizer.services.summarizer import DEFAULT_INSTRUCTION, SYSTEM_PROMPT
from meeting_summarizer.ui.state import FormState

_generator: ChatCompletionGenerator | None = None
_mailer: SmtpMailer | None = None


def get_text_generator() -> TextGenerator:
    """
    Dependency returning the process-wide generator. The OpenAI client is built on
    the first generate_text call, so a missing API key fails inside the request.
    """
    global _generator
    if _generator is None:
        _generator = ChatCompletionGenerator(system_prompt=SYSTEM_PROMPT)
    return _generator


def get_mailer() -> Mailer:
    global _mailer
    if _mailer is None:
        _mailer = SmtpMailer()
    return _mailer


def form_state(
    transcript: str = Form(""),
    prompt: str = Form(DEFAULT_INSTRUCTION),
    summary: str = Form(""),
    recipients: str = Form(""),
    subject: str = Form(DEFAULT_SUBJECT),
) -> FormState:
    """Rebuilds the page state from the fields every UI form carries."""
    return FormState(
        transcript=transcript,
        prompt=prompt,
        summary=summary,
        recipients=recipients,
        subject=subject,
    )
