"""
Response encoder.

Maps a `GenerationOutcome` or a pipeline error onto `(status_code, body)`.
Both deployment shapes serialize the body as JSON and attach `CORS_HEADERS`.
"""

import base64

from headshot.errors import HeadshotError, NoUsableOutput
from headshot.models import HardFailure, SoftFailure, Success

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

TEXT_INSTEAD_OF_IMAGE = "The model returned text instead of an image. Please try again."


def data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def encode_outcome(outcome):
    if isinstance(outcome, Success):
        return 200, {
            "success": True,
            "image": data_uri(outcome.image, outcome.mime_type),
            "mimeType": outcome.mime_type,
        }

    if isinstance(outcome, SoftFailure):
        return 200, {
            "success": False,
            "error": TEXT_INSTEAD_OF_IMAGE,
            "text": outcome.text,
        }

    if isinstance(outcome, HardFailure):
        return encode_error(NoUsableOutput())

    raise TypeError(f"Unknown generation outcome: {outcome!r}")


def encode_error(exc: Exception):
    """Body for any exception that reached the request boundary."""
    if isinstance(exc, HeadshotError):
        body = {"error": exc.message}
        if exc.with_success_flag:
            body = {"success": False, **body}
        return exc.status_code, body

    return 500, {"success": False, "error": str(exc) or HeadshotError.message}
