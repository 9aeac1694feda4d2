"""
Serverless deployment shape.

Python function hosts route each request to a `BaseHTTPRequestHandler`
subclass named `handler`. It runs the same pipeline as the FastAPI app
but parses the multipart body itself and has no health or static routes.
"""

import json
from http.server import BaseHTTPRequestHandler

from headshot.encoder import CORS_HEADERS, PREFLIGHT_HEADERS, encode_error, encode_outcome
from headshot.errors import HeadshotError, LengthRequired, NoFileProvided
from headshot.gemini import require_api_key
from headshot.logger import logger, setup_logger
from headshot.receiver import READ_BLOCK_SIZE, read_multipart
from headshot.service import transform_headshot

setup_logger()


class RequestBody:
    """Reads at most Content-Length bytes from the socket."""

    def __init__(self, rfile, length):
        self.rfile = rfile
        self.remaining = max(length, 0)

    def read(self, size=-1):
        if size < 0 or size > self.remaining:
            size = self.remaining
        if size == 0:
            return b""
        block = self.rfile.read(size)
        self.remaining -= len(block)
        return block

    def discard(self):
        # Unread request bytes would reset the connection before the client sees the reply
        while self.remaining > 0 and self.read(READ_BLOCK_SIZE):
            pass


class handler(BaseHTTPRequestHandler):
    def do_OPTIONS(self):
        self.send_response(200)
        for name, value in PREFLIGHT_HEADERS.items():
            self.send_header(name, value)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_POST(self):
        body = None

        try:
            # Framing errors come first so the body can always be drained
            body = self.request_body()
            api_key = require_api_key()

            upload = read_multipart(body, self.headers.get("Content-Type"))
            logger.info(f"Received {upload.filename!r} ({upload.size} bytes, {upload.mime_type})")

            outcome = transform_headshot(upload, api_key)
            status_code, data = encode_outcome(outcome)

        except HeadshotError as e:
            logger.warning(f"Request failed: {e.message}")
            status_code, data = encode_error(e)
        except Exception as e:
            logger.exception("Error processing image")
            status_code, data = encode_error(e)

        if body is not None:
            body.discard()
        self.send_json_response(status_code, data)

    def request_body(self):
        length = self.headers.get("Content-Length")
        if length is None:
            if self.headers.get("Transfer-Encoding"):
                raise LengthRequired()
            length = "0"
        try:
            return RequestBody(self.rfile, int(length))
        except ValueError:
            logger.warning(f"Upload rejected: invalid Content-Length {length!r}")
            raise NoFileProvided()

    def do_GET(self):
        self.send_method_not_allowed()

    def do_PUT(self):
        self.send_method_not_allowed()

    def do_PATCH(self):
        self.send_method_not_allowed()

    def do_DELETE(self):
        self.send_method_not_allowed()

    def send_method_not_allowed(self):
        self.send_json_response(405, {"error": "Method not allowed"})

    def send_json_response(self, status_code, data):
        payload = json.dumps(data).encode("utf-8")
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")
