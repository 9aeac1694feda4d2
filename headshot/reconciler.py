"""
Stream reconciler.

Reduces the chunk stream to a single outcome. The first image chunk wins
and ends consumption on the spot; the model tends to keep emitting
trailing text after the image and none of it is read. Text seen before
that point is accumulated in case no image ever arrives.
"""

from typing import Iterable

from headshot.models import (
    ChunkKind,
    GenerationOutcome,
    HardFailure,
    SoftFailure,
    StreamChunk,
    Success,
)


def reconcile(chunks: Iterable[StreamChunk]) -> GenerationOutcome:
    image = None
    mime_type = None
    text = ""

    for chunk in chunks:
        if chunk.kind is ChunkKind.EMPTY:
            continue
        if chunk.kind is ChunkKind.IMAGE:
            image = chunk.data
            mime_type = chunk.mime_type
            break
        text += chunk.text

    if image is not None:
        return Success(image=image, mime_type=mime_type)
    if text:
        return SoftFailure(text=text)
    return HardFailure()
