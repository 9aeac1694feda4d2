import json
import socket
import threading
from io import BytesIO
from http.server import HTTPServer

import httpx
import pytest

from conftest import image_response, text_response
from headshot.config import settings
from headshot.serverless import RequestBody, handler


@pytest.fixture
def function_url():
    server = HTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}/api/transform-headshot"
    server.shutdown()
    server.server_close()


def post_image(url, png_bytes, field="image"):
    return httpx.post(url, files={field: ("me.png", png_bytes, "image/png")})


def test_preflight(function_url):
    response = httpx.options(function_url)

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "Content-Type"


def test_other_methods_not_allowed(function_url):
    response = httpx.get(function_url)

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_success(function_url, api_key, fake_gemini, png_bytes):
    fake_gemini.responses = [
        image_response(b"generated", "image/jpeg"),
        text_response("never read"),
    ]

    response = post_image(function_url, png_bytes)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["mimeType"] == "image/jpeg"
    assert body["image"].startswith("data:image/jpeg;base64,")
    assert fake_gemini.pulled == 1


def test_text_only(function_url, api_key, fake_gemini, png_bytes):
    fake_gemini.responses = [text_response("a"), text_response("b")]

    response = post_image(function_url, png_bytes)

    assert response.status_code == 200
    assert response.json()["text"] == "ab"
    assert response.json()["success"] is False


def test_missing_file(function_url, api_key, png_bytes):
    response = post_image(function_url, png_bytes, field="photo")

    assert response.status_code == 400
    assert response.json() == {"error": "No image file uploaded"}


def test_missing_credential_with_file(function_url, no_api_key, png_bytes):
    response = post_image(function_url, png_bytes)

    assert response.status_code == 500
    assert response.json() == {"error": "GEMINI_API_KEY not configured"}


def test_payload_too_large(function_url, api_key, fake_gemini, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 1024)

    response = httpx.post(
        function_url,
        files={"image": ("big.png", b"x" * 200_000, "image/png")},
    )

    assert response.status_code == 413
    assert "error" in response.json()
    assert fake_gemini.calls == []


def test_request_body_stops_at_content_length():
    body = RequestBody(BytesIO(b"abcdefgh"), 5)

    assert body.read(3) == b"abc"
    assert body.read() == b"de"
    assert body.read(10) == b""

    body = RequestBody(BytesIO(b"abcdefgh"), 6)
    body.discard()
    assert body.remaining == 0


def send_raw(url, head):
    """Send request headers only and return (status, body) of the reply."""
    address = httpx.URL(url)
    with socket.create_connection((address.host, address.port), timeout=5) as sock:
        sock.sendall(head)
        reply = b""
        while True:
            data = sock.recv(65536)
            if not data:
                break
            reply += data

    reply_head, _, payload = reply.partition(b"\r\n\r\n")
    status = int(reply_head.split(b" ", 2)[1])
    return status, json.loads(payload)


def test_invalid_content_length(function_url, api_key):
    status, body = send_raw(
        function_url,
        b"POST /api/transform-headshot HTTP/1.0\r\n"
        b"Content-Type: multipart/form-data; boundary=x\r\n"
        b"Content-Length: abc\r\n\r\n",
    )

    assert status == 400
    assert body == {"error": "No image file uploaded"}


def test_chunked_body_needs_content_length(function_url, api_key):
    status, body = send_raw(
        function_url,
        b"POST /api/transform-headshot HTTP/1.0\r\n"
        b"Content-Type: multipart/form-data; boundary=x\r\n"
        b"Transfer-Encoding: chunked\r\n\r\n",
    )

    assert status == 411
    assert body == {"error": "Content-Length required"}
