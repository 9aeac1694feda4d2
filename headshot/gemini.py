"""
Gemini generation invoker.

Builds the multimodal request (fixed headshot prompt + uploaded photo) and
opens a `generate_content_stream` call asking for both IMAGE and TEXT
modalities, so the model can fall back to text when it refuses to draw.
The returned iterator is lazy: nothing past the chunk the caller stops at
is read from the wire.
"""

from typing import Iterator, Optional

import httpx
from google import genai
from google.genai import errors, types

from headshot.config import settings
from headshot.errors import BackendUnavailable, MissingCredential
from headshot.logger import logger
from headshot.models import (
    EmptyChunk,
    GenerationRequest,
    ImageChunk,
    StreamChunk,
    TextChunk,
    UploadedImage,
)
from headshot.prompt import HEADSHOT_PROMPT

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def require_api_key(api_key: Optional[str] = None) -> str:
    api_key = api_key or settings.gemini_api_key
    if not api_key:
        raise MissingCredential()
    return api_key


def build_request(upload: UploadedImage) -> GenerationRequest:
    return GenerationRequest(instruction=HEADSHOT_PROMPT, image=upload)


def build_contents(request: GenerationRequest):
    return [
        types.Content(
            role="user",
            parts=[
                types.Part.from_text(text=request.instruction),
                types.Part.from_bytes(
                    data=request.image.data,
                    mime_type=request.image.mime_type,
                ),
            ],
        )
    ]


def classify_chunk(response) -> StreamChunk:
    """Map one streamed `GenerateContentResponse` onto a `StreamChunk`."""
    candidates = getattr(response, "candidates", None)
    if not candidates or not candidates[0].content or not candidates[0].content.parts:
        return EmptyChunk()

    parts = candidates[0].content.parts

    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            return ImageChunk(
                data=inline_data.data,
                mime_type=inline_data.mime_type or DEFAULT_IMAGE_MIME_TYPE,
            )

    text = "".join(part.text for part in parts if getattr(part, "text", None))
    if text:
        return TextChunk(text=text)

    return EmptyChunk()


def open_stream(
    request: GenerationRequest,
    api_key: str,
    client: Optional[genai.Client] = None,
    model: Optional[str] = None,
) -> Iterator[StreamChunk]:
    """Start the streaming call and yield classified chunks as they arrive.

    Upstream failures, whether raised when the call is opened or halfway
    through the stream, surface as `BackendUnavailable`.
    """
    client = client or genai.Client(api_key=api_key)
    model = model or settings.MODEL_NAME

    logger.info(
        f"Calling {model} with {request.image.size} bytes of {request.image.mime_type}"
    )

    try:
        stream = client.models.generate_content_stream(
            model=model,
            contents=build_contents(request),
            config=types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES),
        )
        for response in stream:
            yield classify_chunk(response)
    except errors.APIError as e:
        logger.error(f"Gemini API error {e.code}: {e.message}")
        raise BackendUnavailable(e.message or str(e)) from e
    except httpx.HTTPError as e:
        logger.error(f"Gemini request failed: {e}")
        raise BackendUnavailable(str(e) or "Could not reach the Gemini API") from e
