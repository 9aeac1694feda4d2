import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from headshot import __version__
from headshot.config import settings
from headshot.encoder import (
    CORS_HEADERS,
    PREFLIGHT_HEADERS,
    encode_error,
    encode_outcome,
)
from headshot.errors import HeadshotError, NoFileProvided, PayloadTooLarge
from headshot.gemini import require_api_key
from headshot.logger import logger, setup_logger
from headshot.receiver import accept_upload
from headshot.service import transform_headshot

setup_logger()

# -------------------- FastAPI Setup --------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Turns an uploaded photo into a professional corporate headshot",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(status_code, body):
    return JSONResponse(body, status_code=status_code, headers=CORS_HEADERS)


async def first_image(request):
    """First `image` file part of the form; text fields and other files are ignored."""
    try:
        form = await request.form()
    except (StarletteHTTPException, MultiPartException) as e:
        logger.warning(f"Upload rejected: unreadable form body ({getattr(e, 'detail', e)})")
        raise NoFileProvided() from e

    for value in form.getlist("image"):
        if isinstance(value, UploadFile):
            return value
    raise NoFileProvided()


# -------------------- Routes --------------------
@app.options("/transform-headshot")
async def transform_headshot_preflight():
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)


@app.post("/transform-headshot")
async def transform_headshot_route(request: Request):
    try:
        api_key = require_api_key()
        image = await first_image(request)
        if image.size is not None and image.size > settings.MAX_UPLOAD_BYTES:
            raise PayloadTooLarge(settings.MAX_UPLOAD_BYTES)

        upload = accept_upload(
            await image.read(),
            image.content_type,
            image.filename,
        )
        logger.info(f"Received {upload.filename!r} ({upload.size} bytes, {upload.mime_type})")

        outcome = await run_in_threadpool(transform_headshot, upload, api_key)
        return _json(*encode_outcome(outcome))

    except HeadshotError as e:
        logger.warning(f"Request failed: {e.message}")
        return _json(*encode_error(e))
    except Exception as e:
        logger.exception("Error processing image")
        return _json(*encode_error(e))


@app.get("/health")
async def health():
    return _json(200, {"status": "ok", "message": "Server is running"})


# Mounted last so the API routes above take precedence
if os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
