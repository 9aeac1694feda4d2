"""
Error taxonomy for the headshot pipeline.

Every error carries the HTTP status and the message the client sees.
`with_success_flag` controls whether the JSON body also carries
`success: false`: request-validation errors answer with a bare `error`
object, failures inside the generation pipeline include the flag.
"""


class HeadshotError(Exception):
    status_code = 500
    message = "Failed to process image"
    with_success_flag = True

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)


class NoFileProvided(HeadshotError):
    status_code = 400
    message = "No image file uploaded"
    with_success_flag = False


class PayloadTooLarge(HeadshotError):
    status_code = 413
    message = "Image exceeds the 10 MB upload limit"
    with_success_flag = False

    def __init__(self, max_bytes=None):
        message = None
        if max_bytes:
            message = f"Image exceeds the {max_bytes // (1024 * 1024)} MB upload limit"
        super().__init__(message)


class MissingCredential(HeadshotError):
    status_code = 500
    message = "GEMINI_API_KEY not configured"
    with_success_flag = False


class BackendUnavailable(HeadshotError):
    """Network, auth or quota failure reported by the Gemini API."""
    status_code = 500


class NoUsableOutput(HeadshotError):
    status_code = 500
    message = "Failed to generate headshot image"


class LengthRequired(HeadshotError):
    """Body sent without Content-Length (e.g. chunked); the function host always sets it."""
    status_code = 411
    message = "Content-Length required"
    with_success_flag = False
