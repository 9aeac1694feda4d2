"""
Per-request data types.

Nothing here outlives a request: an `UploadedImage` is built from the body,
wrapped in a `GenerationRequest`, the backend stream is read as
`StreamChunk`s and reduced to one `GenerationOutcome`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass
class UploadedImage:
    data: bytes
    mime_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class GenerationRequest:
    instruction: str
    image: UploadedImage


# -------------------- Stream chunks --------------------

class ChunkKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True)
class ImageChunk:
    data: bytes
    mime_type: str
    kind: ChunkKind = field(default=ChunkKind.IMAGE, init=False)


@dataclass(frozen=True)
class TextChunk:
    text: str
    kind: ChunkKind = field(default=ChunkKind.TEXT, init=False)


@dataclass(frozen=True)
class EmptyChunk:
    kind: ChunkKind = field(default=ChunkKind.EMPTY, init=False)


StreamChunk = Union[ImageChunk, TextChunk, EmptyChunk]


# -------------------- Outcomes --------------------

@dataclass(frozen=True)
class Success:
    image: bytes
    mime_type: str


@dataclass(frozen=True)
class SoftFailure:
    text: str


@dataclass(frozen=True)
class HardFailure:
    reason: str = "The model returned neither an image nor text"


GenerationOutcome = Union[Success, SoftFailure, HardFailure]
