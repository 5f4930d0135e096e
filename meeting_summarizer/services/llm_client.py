from typing import Protocol

from openai import OpenAI
from meeting_summarizer.core.config import (
    GROQ_API_KEY,
    LLM_BASE_URL,
    LLM_MODEL,
    LLM_TEMPERATURE,
)

_client: OpenAI | None = None


class TextGenerator(Protocol):
    def generate_text(self, prompt: str) -> str: ...


def get_client() -> OpenAI:
    global _client
    if _client is None:
        if not GROQ_API_KEY:
            raise RuntimeError("Missing GROQ_API_KEY in .env")
        _client = OpenAI(api_key=GROQ_API_KEY, base_url=LLM_BASE_URL)
    return _client


class ChatCompletionGenerator:
    """
    TextGenerator backed by an OpenAI-compatible chat completions endpoint.
    The system prompt is fixed per instance; each call sends one user message.
    """

    def __init__(
        self,
        client: OpenAI | None = None,
        system_prompt: str = "",
        model: str = LLM_MODEL,
        temperature: float = LLM_TEMPERATURE,
    ):
        self._client = client
        self.system_prompt = system_prompt
        self.model = model
        self.temperature = temperature

    def generate_text(self, prompt: str) -> str:
        client = self._client or get_client()
        resp = client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
        )
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""
