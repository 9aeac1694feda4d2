from io import BytesIO

import pytest
from google.genai import types
from PIL import Image


def image_response(data, mime_type="image/png"):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))],
                )
            )
        ]
    )


def text_response(text):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))
        ]
    )


def empty_response():
    return types.GenerateContentResponse(candidates=[])


class FakeModels:
    def __init__(self, responses=None, error=None):
        self.responses = responses or []
        self.error = error
        self.calls = []
        self.pulled = 0

    def generate_content_stream(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        for response in self.responses:
            self.pulled += 1
            yield response


class FakeClient:
    def __init__(self, models):
        self.models = models


@pytest.fixture
def png_bytes():
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(120, 120, 120)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture
def fake_gemini(monkeypatch):
    """Replace `genai.Client` so every request streams from `FakeModels`."""
    models = FakeModels()
    created = []

    def make_client(api_key=None, **kwargs):
        created.append(api_key)
        return FakeClient(models)

    monkeypatch.setattr("headshot.gemini.genai.Client", make_client)
    models.created = created
    return models
