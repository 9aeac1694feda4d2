"""
Headshot transformation service shared by the server and serverless shapes.

Processing flow:
    1. Wrap the upload in a `GenerationRequest` with the fixed prompt.
    2. Open the Gemini stream.
    3. Reconcile the stream into one outcome, closing the stream as soon
       as the reconciler stops pulling from it.
"""

from typing import Optional

from headshot.gemini import build_request, open_stream, require_api_key
from headshot.logger import logger
from headshot.models import GenerationOutcome, UploadedImage
from headshot.reconciler import reconcile


def transform_headshot(
    upload: UploadedImage,
    api_key: Optional[str] = None,
    client=None,
) -> GenerationOutcome:
    api_key = require_api_key(api_key)
    request = build_request(upload)

    stream = open_stream(request, api_key, client=client)
    try:
        outcome = reconcile(stream)
    finally:
        stream.close()

    logger.info(f"Generation finished with {type(outcome).__name__}")
    return outcome
