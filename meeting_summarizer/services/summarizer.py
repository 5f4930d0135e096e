import logging

from openai import OpenAIError

from meeting_summarizer.core.errors import UpstreamError
from meeting_summarizer.services.llm_client import TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION = "Summarize the key points and action items."

SYSTEM_PROMPT = "You produce faithful, structured summaries from transcripts."

_REQUIREMENTS = (
    "Requirements:\n"
    "- Be concise and well structured.\n"
    "- Use markdown headings and bullet points when appropriate.\n"
    "- If action items exist, list them with owners and due dates if available.\n"
    "- If risks or open questions exist, include them.\n"
    "- Never fabricate details not present in the transcript.\n"
)


def resolve_instruction(instruction: str | None) -> str:
    if instruction and instruction.strip():
        return instruction
    return DEFAULT_INSTRUCTION


def build_prompt(transcript: str, instruction: str) -> str:
    return (
        "You are an assistant that produces structured summaries from meeting or call transcripts.\n\n"
        f"Transcript:\n{transcript}\n\n"
        f"Instruction from user: {instruction}\n\n"
        + _REQUIREMENTS
    )


def summarize_transcript(
    transcript: str,
    instruction: str | None,
    generator: TextGenerator,
    request_id: str,
) -> str:
    prompt = build_prompt(transcript, resolve_instruction(instruction))
    logger.info(f"[{request_id}] calling_llm_for_summary prompt_chars={len(prompt)}")

    try:
        text = generator.generate_text(prompt)
    except OpenAIError as e:
        raise UpstreamError(f"text generation failed: {type(e).__name__}: {e}") from e

    logger.info(f"[{request_id}] llm_returned chars={len(text or '')}")
    return (text or "").strip()
