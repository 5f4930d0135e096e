import pytest
from fastapi.testclient import TestClient

from meeting_summarizer.api.dependencies import get_mailer, get_text_generator
from meeting_summarizer.main import app


class FakeGenerator:
    def __init__(self, text="  ## Summary\n- Ship the release  "):
        self.text = text
        self.error = None
        self.prompts = []

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


class FakeMailer:
    def __init__(self, message_id="<msg-1@example.test>"):
        self.message_id = message_id
        self.error = None
        self.sent = []

    def send_mail(self, message):
        self.sent.append(message)
        if self.error:
            raise self.error
        return self.message_id


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(generator, mailer):
    app.dependency_overrides[get_text_generator] = lambda: generator
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
