from types import SimpleNamespace

import pytest
from openai import OpenAIError

from meeting_summarizer.core.errors import UpstreamError
from meeting_summarizer.services.llm_client import ChatCompletionGenerator
from meeting_summarizer.services.summarizer import (
    DEFAULT_INSTRUCTION,
    SYSTEM_PROMPT,
    build_prompt,
    summarize_transcript,
)

from conftest import FakeGenerator


def test_build_prompt_embeds_transcript_instruction_and_rules():
    prompt = build_prompt("Alice: we ship Friday", "List decisions only")

    assert prompt.startswith("You are an assistant that produces structured summaries")
    assert "Transcript:\nAlice: we ship Friday\n\n" in prompt
    assert "Instruction from user: List decisions only\n\n" in prompt
    assert prompt.index("Transcript:") < prompt.index("Instruction from user:") < prompt.index("Requirements:")
    assert "- If action items exist, list them with owners and due dates if available.\n" in prompt
    assert "- If risks or open questions exist, include them.\n" in prompt
    assert prompt.endswith("- Never fabricate details not present in the transcript.\n")


def test_summarize_transcript_trims_output():
    gen = FakeGenerator(text="\n  # Summary\n- one  \n")
    assert summarize_transcript("Alice: hello everyone", "Be brief", gen, "req-1") == "# Summary\n- one"
    assert "Instruction from user: Be brief" in gen.prompts[0]


@pytest.mark.parametrize("instruction", [None, "", "   "])
def test_summarize_transcript_defaults_instruction(instruction):
    gen = FakeGenerator()
    summarize_transcript("Alice: hello everyone", instruction, gen, "req-1")
    assert f"Instruction from user: {DEFAULT_INSTRUCTION}" in gen.prompts[0]


def test_summarize_transcript_wraps_openai_errors():
    gen = FakeGenerator()
    gen.error = OpenAIError("rate limited")

    with pytest.raises(UpstreamError):
        summarize_transcript("Alice: hello everyone", None, gen, "req-1")


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(content):
    completions = FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_chat_completion_generator_sends_system_and_user_messages():
    client, completions = _fake_client("## Notes")
    gen = ChatCompletionGenerator(client=client, system_prompt=SYSTEM_PROMPT, model="test-model", temperature=0.2)

    assert gen.generate_text("summarize this") == "## Notes"

    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["temperature"] == 0.2
    assert call["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "summarize this"},
    ]


def test_chat_completion_generator_handles_empty_content():
    client, _ = _fake_client(None)
    gen = ChatCompletionGenerator(client=client, system_prompt=SYSTEM_PROMPT)
    assert gen.generate_text("summarize this") == ""
