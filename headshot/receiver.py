"""
Upload receiver.

Turns an incoming upload into an `UploadedImage`. The FastAPI app gets the
file already parsed by Starlette and only calls `accept_upload`; the
serverless handler reads the raw body through `read_multipart`, which feeds
it block by block into python-multipart so the size limit is enforced
before the whole file sits in memory.
"""

from io import BytesIO
from typing import Optional

from PIL import Image
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from headshot.config import settings
from headshot.errors import NoFileProvided, PayloadTooLarge
from headshot.logger import logger
from headshot.models import UploadedImage

IMAGE_FIELD = "image"
READ_BLOCK_SIZE = 64 * 1024
FALLBACK_MIME_TYPE = "application/octet-stream"


def sniff_mime_type(data: bytes) -> Optional[str]:
    """Guess the image MIME type from its bytes, or None if Pillow can't tell."""
    try:
        with Image.open(BytesIO(data)) as img:
            return Image.MIME.get(img.format)
    except OSError:
        return None


def accept_upload(
    data: bytes,
    mime_type: Optional[str] = None,
    filename: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> UploadedImage:
    max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES

    if not data:
        raise NoFileProvided()
    if len(data) > max_bytes:
        raise PayloadTooLarge(max_bytes)

    # Browsers occasionally send octet-stream for pasted images
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = sniff_mime_type(data) or mime_type or FALLBACK_MIME_TYPE

    return UploadedImage(data=data, mime_type=mime_type, filename=filename)


# -------------------- Multipart parsing --------------------

class _ImagePartCollector:
    """Callback target for `MultipartParser` that keeps the first `image` file part."""

    def __init__(self, field_name: str, max_bytes: int):
        self.field_name = field_name.encode()
        self.max_bytes = max_bytes
        self.found = None

        self._headers = {}
        self._header_field = b""
        self._header_value = b""
        self._capturing = False
        self._buffer = bytearray()
        self._content_type = None
        self._filename = None

    @property
    def callbacks(self):
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self):
        self._headers = {}

    def on_header_field(self, data, start, end):
        self._header_field += data[start:end]

    def on_header_value(self, data, start, end):
        self._header_value += data[start:end]

    def on_header_end(self):
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self):
        _, options = parse_options_header(self._headers.get(b"content-disposition"))
        self._capturing = (
            self.found is None
            and options.get(b"name") == self.field_name
            and b"filename" in options
        )
        if not self._capturing:
            return

        content_type, _ = parse_options_header(self._headers.get(b"content-type"))
        self._content_type = content_type.decode("latin-1") or None
        self._filename = options[b"filename"].decode("utf-8", errors="replace")
        self._buffer = bytearray()

    def on_part_data(self, data, start, end):
        if not self._capturing:
            return
        self._buffer += data[start:end]
        if len(self._buffer) > self.max_bytes:
            raise PayloadTooLarge(self.max_bytes)

    def on_part_end(self):
        if self._capturing:
            self.found = (bytes(self._buffer), self._content_type, self._filename)
            self._capturing = False


def read_multipart(
    stream,
    content_type: Optional[str],
    content_length: Optional[int] = None,
    max_bytes: Optional[int] = None,
) -> UploadedImage:
    """Parse a multipart/form-data body from `stream` and return its `image` file.

    Other fields and files are ignored. `content_length` bounds how much is
    read from `stream`; pass it whenever the stream is a socket.
    """
    max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES

    ctype, params = parse_options_header(content_type)
    boundary = params.get(b"boundary")
    if ctype != b"multipart/form-data" or not boundary:
        logger.warning(f"Upload rejected: unsupported content type {content_type!r}")
        raise NoFileProvided()

    collector = _ImagePartCollector(IMAGE_FIELD, max_bytes)
    parser = MultipartParser(boundary, collector.callbacks)

    remaining = content_length
    try:
        while remaining is None or remaining > 0:
            size = READ_BLOCK_SIZE if remaining is None else min(READ_BLOCK_SIZE, remaining)
            block = stream.read(size)
            if not block:
                break
            if remaining is not None:
                remaining -= len(block)
            parser.write(block)
        parser.finalize()
    except MultipartParseError as e:
        logger.warning(f"Upload rejected: malformed multipart body ({e})")
        raise NoFileProvided() from e

    if collector.found is None:
        raise NoFileProvided()

    data, mime_type, filename = collector.found
    return accept_upload(data, mime_type, filename, max_bytes=max_bytes)
